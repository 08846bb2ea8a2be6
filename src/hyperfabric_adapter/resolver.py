"""Bounded $ref resolution for OpenAPI schemas."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

MAX_RESOLVE_DEPTH = 5

_COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")


class SchemaResolver:
    """Inline internal references of a schema against the root document.

    Resolution never mutates the document; resolved nodes are fresh dicts
    that share unchanged leaves with the original.
    """

    def __init__(self, document: Mapping[str, Any]) -> None:
        self.document = document

    def resolve_reference(self, node: Any) -> Any:
        if not isinstance(node, Mapping):
            return node
        ref = node.get("$ref")
        if not isinstance(ref, str):
            return node

        target = self._lookup(ref)
        if target is None:
            logger.warning("Unresolvable $ref %s; keeping the unresolved schema", ref)
            return node
        return target

    def resolve_deep(self, node: Any, depth: int = 0) -> Any:
        if depth > MAX_RESOLVE_DEPTH or not isinstance(node, Mapping):
            return node

        resolved = self.resolve_reference(node)
        if resolved is not node and isinstance(resolved, Mapping) and "$ref" in resolved:
            # Alias chain: the target is itself a reference.
            return self.resolve_deep(resolved, depth + 1)
        if not isinstance(resolved, Mapping):
            return resolved

        result: Dict[str, Any] = dict(resolved)

        properties = resolved.get("properties")
        if isinstance(properties, Mapping):
            result["properties"] = {
                name: self.resolve_deep(prop, depth + 1) for name, prop in properties.items()
            }

        if "items" in resolved:
            result["items"] = self.resolve_deep(resolved["items"], depth + 1)

        additional = resolved.get("additionalProperties")
        if isinstance(additional, Mapping):
            result["additionalProperties"] = self.resolve_deep(additional, depth + 1)

        for key in _COMPOSITION_KEYS:
            members = resolved.get(key)
            if isinstance(members, list):
                result[key] = [self.resolve_deep(member, depth + 1) for member in members]

        return result

    def _lookup(self, ref: str) -> Any:
        if not ref.startswith("#/"):
            return None

        node: Any = self.document
        for raw_part in ref[2:].split("/"):
            part = raw_part.replace("~1", "/").replace("~0", "~")
            if isinstance(node, Mapping) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                return None
        return node

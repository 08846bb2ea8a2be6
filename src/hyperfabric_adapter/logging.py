"""Logging setup for the adapter plus helpers that keep credentials out of logs."""

from __future__ import annotations

import logging
import re
import sys
from typing import Any, Mapping

_SENSITIVE_KEYS = re.compile(r"(token|secret|api[_-]?key|password|authorization)", re.IGNORECASE)
_REDACTED = "***REDACTED***"

# Loggers that would echo every upstream request URL at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str) -> None:
    # stdout carries the stdio transport, so logs go to stderr only.
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if logging.getLevelName(level) != logging.DEBUG:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def redact_payload(payload: Any) -> Any:
    """Copy of a tool payload with values under sensitive keys masked.

    Descends into nested objects and arrays, since request bodies such as
    ``{"fabrics": [{...}]}`` carry their fields inside lists.
    """
    if isinstance(payload, Mapping):
        return {
            key: _REDACTED if _SENSITIVE_KEYS.search(str(key)) else redact_payload(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact_payload(item) for item in payload]
    return payload


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"

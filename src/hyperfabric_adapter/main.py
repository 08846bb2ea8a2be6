"""CLI entry point for the Hyperfabric Adapter."""

from __future__ import annotations

import asyncio
import logging
import sys

import uvicorn
from pydantic import ValidationError

from .config import Settings, get_settings
from .exceptions import SpecError
from .logging import configure_logging
from .server import build_server

logger = logging.getLogger(__name__)


async def _run(settings: Settings) -> None:
    mcp, app = await build_server(settings)
    transport = settings.adapter_transport.lower()

    if transport in {"http", "streamable-http", "streamablehttp"}:
        if not app:
            raise RuntimeError(f"HTTP app unavailable for transport={transport}")
        config = uvicorn.Config(
            app,
            host=settings.adapter_host,
            port=settings.adapter_port,
            log_level=settings.adapter_log_level.lower(),
        )
        server = uvicorn.Server(config)
        await server.serve()
        return
    if transport != "stdio":
        raise RuntimeError(f"Unsupported transport: {settings.adapter_transport}")

    logger.info("Hyperfabric adapter is running on stdio")
    await mcp.run_stdio_async(show_banner=False)


def main() -> None:
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging("INFO")
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    configure_logging(settings.adapter_log_level)
    try:
        asyncio.run(_run(settings))
    except SpecError as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()

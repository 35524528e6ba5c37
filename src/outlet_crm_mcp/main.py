#!/usr/bin/env python3
"""Entry point for the ``outlet-crm-mcp`` command."""

import argparse
from typing import List, Optional

from dotenv import load_dotenv

from .config import VALID_TRANSPORTS, ServerConfig
from .server import run_server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Outlet CRM MCP Server - CRM leads, pipeline and price catalog tools via Model Context Protocol",
    )
    parser.add_argument(
        "--transport",
        choices=VALID_TRANSPORTS,
        help="Transport protocol (default: MCP_TRANSPORT or stdio)",
    )
    parser.add_argument("--host", help="Host to bind to for http/sse (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to bind to for http/sse (default: PORT or 3001)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the MCP server."""
    args = build_parser().parse_args(argv)

    # .env in the working directory; real environment variables win
    load_dotenv(override=False)

    config = ServerConfig.from_env().with_overrides(
        transport=args.transport,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )
    try:
        run_server(config)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

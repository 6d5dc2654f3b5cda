#!/usr/bin/env python3
"""
Entry point for the CHUK Chords MCP Server.

The server speaks MCP over stdio.
"""

import argparse
import asyncio
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="CHUK Chords MCP Server")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # Import after argument parsing so --help stays fast
    from chuk_mcp_chords.async_server import mcp

    logger.info("Starting CHUK Chords MCP Server (stdio)")
    asyncio.run(mcp.run_stdio())


if __name__ == "__main__":
    main()

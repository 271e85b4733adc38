"""MCP server entry point."""

import logging
import os
import sys
from typing import Optional

from fastmcp import FastMCP

from startpage_mcp_tool.config import StartpageConfig
from startpage_mcp_tool.tools import register_startpage_tools

logger = logging.getLogger("startpage-mcp")


def setup_logging(level: str = "INFO") -> None:
    # stdout carries the MCP stdio transport
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())


def create_server(cfg: Optional[StartpageConfig] = None, non_destructive: bool = True) -> FastMCP:
    cfg = cfg or StartpageConfig.from_env()
    server = FastMCP(name="startpage-mcp")
    register_startpage_tools(server, non_destructive, cfg)
    return server


def main() -> None:
    setup_logging(os.environ.get("STARTPAGE_LOG_LEVEL", "INFO"))
    server = create_server()
    logger.info("Starting startpage MCP server on stdio")
    server.run()


if __name__ == "__main__":
    main()

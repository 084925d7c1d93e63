"""MCP server entry point: tool registration and stdio transport."""

from __future__ import annotations

from dotx_import.logger import configure_logging
from dotx_import.mcp_app import mcp

import dotx_import.tools  # noqa: F401 -- trigger tool registration


def main() -> None:
    configure_logging()
    mcp.run()


if __name__ == "__main__":
    main()

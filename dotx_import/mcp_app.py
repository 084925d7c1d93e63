"""Shared FastMCP instance; tool modules register on it at import time."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

mcp = FastMCP("template-importer")

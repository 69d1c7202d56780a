"""Grep MCP server."""

from .tool import ActiveSearches, GrepTool, GrepToolInvocation

__all__ = ["ActiveSearches", "GrepTool", "GrepToolInvocation"]

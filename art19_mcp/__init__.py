"""MCP server exposing the ART19 content API as tools."""

__version__ = "1.0.0"

"""Building blocks for an MCP gateway: a stdio MCP client, message types and runtime helpers."""

__version__ = "0.1.0"
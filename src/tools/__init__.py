"""MCP tools for AI-agent access to the product API."""

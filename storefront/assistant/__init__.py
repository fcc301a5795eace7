"""Shopping assistant - catalog search exposed as MCP tools."""

"""
Todo service package.

The FastAPI application lives in ``todo_service.main``; the MCP adapter that
exposes the service as tools and resources lives in ``todo_service.mcp_server``.
"""

__version__ = "1.0.0"

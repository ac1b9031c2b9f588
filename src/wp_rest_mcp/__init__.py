# WordPress REST API to MCP bridge
# Main module initialization

__version__ = "0.1.0"


def main() -> None:
    """CLI entry point for the HTTP application."""
    import uvicorn

    from .config import settings

    uvicorn.run("wp_rest_mcp.main:app", host=settings.host, port=settings.port)

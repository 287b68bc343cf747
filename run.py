"""Entry point for serving the Portfolio API.

Host and port are read from the environment variables ``HOST`` and
``PORT``; the remaining configuration (database path, log level, ...)
is handled by ``portfolio_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import os

from uvicorn import Config, Server


async def main() -> None:
    """Serve the application until interrupted."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(
        app="portfolio_api.app.main:app",
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass

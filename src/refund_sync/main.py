"""Stripe Refund Sync - Main Entry Point."""

import os

from refund_sync.config.settings import settings
from refund_sync.server.app import create_app

# Create FastAPI application
app = create_app()

if __name__ == "__main__":
    import uvicorn

    reload = os.getenv("RELOAD", "false").lower() == "true"

    uvicorn.run(
        "refund_sync.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
        timeout_keep_alive=5,
        access_log=False,  # Structured logging instead of uvicorn access log
    )

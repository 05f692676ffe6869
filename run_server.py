#!/usr/bin/env python3
"""
Run script for the claimdesk API.

Usage:
    python run_server.py

Settings come from CLAIMDESK_* environment variables or a .env file
(see claimdesk/utils/config.py).
"""

import logging

# Quiet per-request logging from HTTP libraries before they're imported
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("python_multipart").setLevel(logging.WARNING)

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def main():
    """Run the API server."""
    import uvicorn
    from claimdesk.utils.config import get_settings

    settings = get_settings()

    print("=" * 60)
    print("claimdesk API")
    print("=" * 60)
    print(f"Server: http://{settings.host}:{settings.port}")
    print(f"Storage: {settings.storage_path}")
    print(f"Decision delay: {settings.processing_delay_seconds}s")
    print("=" * 60)
    print()
    print("Endpoints:")
    print(f"  - Health: http://{settings.host}:{settings.port}/health")
    print(f"  - Claims: http://{settings.host}:{settings.port}/claims")
    print(f"  - File a claim: POST http://{settings.host}:{settings.port}/claims")
    print()

    uvicorn.run(
        "claimdesk.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()

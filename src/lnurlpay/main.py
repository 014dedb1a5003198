from __future__ import annotations

import asyncio
import logging
import sys
import uvicorn

# Install uvloop for better async performance (Linux/macOS only)
if sys.platform != "win32":
    import uvloop

    asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())

from .envs.server_env import get_settings


def main() -> None:
    """Main entry point for the pay service."""
    logging.basicConfig(level=logging.INFO)

    settings = get_settings()

    print(f"Starting {settings.app_name} v{settings.app_version}")
    print(f"Public address: {settings.protocol}://{settings.host}:{settings.port}")
    print(f"LND REST: {settings.lnd_rest_host}")
    print(f"API will be available at: http://{settings.api_host}:{settings.api_port}")

    # Commitments live in process memory, so a single worker serves every
    # phase-1 and phase-2 request.
    uvicorn.run(
        "lnurlpay.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
        workers=1,
        log_level="info",
    )


if __name__ == "__main__":
    main()

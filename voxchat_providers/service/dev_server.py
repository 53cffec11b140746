"""Development server for the HTTP bridge.

Environment:

- ``VOXCHAT_SERVICE_HOST``: bind address (default ``127.0.0.1``)
- ``VOXCHAT_SERVICE_PORT``: bind port (default ``8092``)
- ``VOXCHAT_SERVICE_RELOAD``: ``true`` to enable auto-reload (default off)
"""

from __future__ import annotations

import os

import uvicorn

from ..config.defaults import SERVICE_DEFAULT_HOST, SERVICE_DEFAULT_PORT

APP_FACTORY_PATH = "voxchat_providers.service.app:create_app"


def _env_port(default: int) -> int:
    raw = os.getenv("VOXCHAT_SERVICE_PORT", "").strip()
    return int(raw) if raw.isdigit() else default


def main() -> None:
    """Serve the bridge with uvicorn until interrupted."""
    uvicorn.run(
        APP_FACTORY_PATH,
        factory=True,
        host=os.getenv("VOXCHAT_SERVICE_HOST", SERVICE_DEFAULT_HOST),
        port=_env_port(SERVICE_DEFAULT_PORT),
        reload=os.getenv("VOXCHAT_SERVICE_RELOAD", "false").strip().lower() == "true",
    )


if __name__ == "__main__":
    main()

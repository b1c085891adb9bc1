"""
Process entry point: `python -m userapi` or the `userapi` console script.

Reads SERVER_HOST / SERVER_PORT from the environment and serves
userapi.main:app with uvicorn.
"""

import uvicorn

from userapi.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "userapi.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
        # SIGTERM from Kubernetes triggers uvicorn's graceful shutdown,
        # which runs the lifespan shutdown and disposes the pool.
        timeout_graceful_shutdown=10,
    )


if __name__ == "__main__":
    main()

"""
Streakbook — Entry Point.

Single entry point: `python main.py` starts the HTTP API.
"""

import logging

from streakbook.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

import uvicorn

from streakbook.api.app import create_app


def main() -> None:
    app = create_app()
    logging.getLogger(__name__).info(
        "Serving Streakbook on %s:%d (db: %s)",
        settings.HOST, settings.PORT, settings.DATABASE_PATH,
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()

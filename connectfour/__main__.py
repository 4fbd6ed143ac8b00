"""Run the game server with uvicorn: `python -m connectfour`."""

from __future__ import annotations

import uvicorn

from connectfour.core.config import load_settings
from connectfour.core.logconfig import configure_logging


def main() -> None:
    settings = load_settings()
    configure_logging(settings.connectfour_log_level)
    uvicorn.run(
        "connectfour.main:app",
        host=settings.connectfour_app_host,
        port=settings.connectfour_app_port,
        log_level=settings.connectfour_log_level,
    )


if __name__ == "__main__":
    main()

"""Run the API server: ``python -m taskboard``."""
from __future__ import annotations

from uvicorn import run

from taskboard.core.config import get_settings


def main() -> None:
    settings = get_settings()
    run("taskboard.main:app", host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    main()

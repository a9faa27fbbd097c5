"""Entry point: ``python -m chatterbyte``."""

from __future__ import annotations

import uvicorn

from .config import Settings
from .logging import setup_logging


def main() -> None:
    settings = Settings()  # type: ignore[call-arg]
    setup_logging(json=settings.log_json, level=settings.log_level, mode=settings.mode)

    uvicorn.run(
        "chatterbyte.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        # keep the structlog root handler installed by setup_logging
        log_config=None,
    )


if __name__ == "__main__":
    main()

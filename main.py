"""TubeGenie API - HTTP server entry point."""
import logging
import sys

import uvicorn

from api.app import create_app
from config import Settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stdout,
    )
    # SDK request logs repeat what the client layer already reports
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)

    app = create_app(settings)
    logger.info("Serving on %s:%d (%s)", settings.host, settings.port, settings.environment)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()

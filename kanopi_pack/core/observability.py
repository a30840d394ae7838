import logging

import logfire

from .config import settings

logger = logging.getLogger(__name__)


def configure_observability() -> None:
    """Configure process logging, and Logfire when a token is set."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
        ],
    )

    if settings.LOGFIRE_TOKEN:
        try:
            logfire.configure(token=settings.LOGFIRE_TOKEN)
        except Exception as e:
            logger.warning(f"Failed to configure Logfire: {e}")

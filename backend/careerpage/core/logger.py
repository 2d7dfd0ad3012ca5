import logging

from careerpage.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> logging.Logger:
    """Configure root logging once for the process."""
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)
    return logging.getLogger("careerpage")

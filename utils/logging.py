import logging
from typing import Optional

from config.settings import Settings, settings as default_settings

NOISY_LOGGERS = ["httpx", "httpcore", "anthropic", "google", "urllib3", "asyncio"]


def setup_logging(settings: Optional[Settings] = None):
    settings = settings or default_settings
    level = logging.DEBUG if settings.debug else settings.logs.level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        if settings.debug
        else "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

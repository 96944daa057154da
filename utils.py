# utils.py
from __future__ import annotations

import logging
from typing import Optional

from config import get_settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def get_logger(name: str) -> logging.Logger:
    """
    Named logger with a single stream handler attached.

    Safe to call repeatedly for the same name; the handler is only added
    the first time. The level comes from LOG_LEVEL.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(get_settings().log_level.upper())
    return logger


# ---------------------------------------------------------------------------
# Product images
# ---------------------------------------------------------------------------

def resolve_image_url(image: Optional[str]) -> str:
    """
    Turn a stored image filename into a URL under the uploads base path.
    Products without an image get the bundled placeholder.
    """
    settings = get_settings()
    if not image:
        return settings.placeholder_image
    if image.startswith(("http://", "https://")):
        return image
    return f"{settings.uploads_base_url.rstrip('/')}/{image.lstrip('/')}"


__all__ = [
    "LOG_FORMAT",
    "get_logger",
    "resolve_image_url",
]

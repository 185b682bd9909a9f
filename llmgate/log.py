"""
Logging helpers.

Modules log through ``logging.getLogger(__name__)``; applications call
:func:`setup_logging` once to render records with rich.
"""
import logging
from typing import Any, Optional

from rich.logging import RichHandler

SENSITIVE_KEYS = ("authorization", "api_key", "apikey", "api-key", "secret", "token", "jwt", "private_key")


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a RichHandler to the ``llmgate`` logger.

    Calling it again only updates the level.

    Args:
        level (str, optional): Level name. Defaults to the LLMGATE_LOG_LEVEL setting.

    Returns:
        logging.Logger: The package logger.
    """
    from .config import settings

    logger = logging.getLogger("llmgate")
    logger.setLevel((level or settings.log_level).upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(rich_tracebacks=True, show_path=False))
    return logger


def _mask_value(value: str) -> str:
    if len(value) <= 8:
        return f"{value[:2]}***{value[-2:]}"
    return f"{value[:4]}***{value[-4:]}"


def mask_sensitive(data: Any) -> Any:
    """
    Return a copy of ``data`` with credential-like values masked.

    Keys are matched case-insensitively against SENSITIVE_KEYS; nested
    mappings are walked. Non-mapping values are returned unchanged.
    """
    if not isinstance(data, dict) and not hasattr(data, "items"):
        return data

    masked = {}
    for key, value in data.items():
        lowered = str(key).lower()
        if any(marker in lowered for marker in SENSITIVE_KEYS) and isinstance(value, str):
            masked[key] = _mask_value(value)
        elif isinstance(value, dict):
            masked[key] = mask_sensitive(value)
        else:
            masked[key] = value
    return masked

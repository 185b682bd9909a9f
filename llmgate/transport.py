"""HTTP client factory shared by all provider adapters."""
import logging
from typing import Any, Optional

import httpx

from .config import LLM_TIMEOUT_SECONDS
from .log import mask_sensitive

logger = logging.getLogger(__name__)


async def _log_request(request: httpx.Request) -> None:
    logger.debug("LLM Request: %s %s", request.method, request.url)
    logger.debug("Request Headers: %s", mask_sensitive(dict(request.headers)))


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    if response.is_success:
        logger.debug("LLM Response Success: %s %s", request.method, request.url)
        return

    # Body must be read before it can be inspected inside a hook
    await response.aread()
    logger.error(
        "LLM Error Details:\nStatus: %s\nURL: %s %s\nResponse Data: %s",
        response.status_code,
        request.method,
        request.url,
        response.text,
    )


def create_llm_client(timeout: Optional[float] = None, **kwargs: Any) -> httpx.AsyncClient:
    """
    Create the async HTTP client used for LLM calls.

    The client has a fixed timeout (two minutes by default) and event hooks
    that log every request and response.

    Args:
        timeout (float, optional): Timeout in seconds for the whole request.
        **kwargs: Extra httpx.AsyncClient arguments (e.g. ``transport`` in tests).

    Returns:
        httpx.AsyncClient: Configured client.
    """
    return httpx.AsyncClient(
        timeout=timeout if timeout is not None else LLM_TIMEOUT_SECONDS,
        event_hooks={"request": [_log_request], "response": [_log_response]},
        **kwargs,
    )

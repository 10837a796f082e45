"""Remote document acquisition."""

import logging
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30


def is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def get(url: str, timeout: float = FETCH_TIMEOUT) -> str:
    """Fetch ``url`` and return the body text. HTTP errors propagate."""
    logger.debug("Fetching %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text

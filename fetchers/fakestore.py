# fetchers/fakestore.py
import os
from typing import Any, Dict, List

import requests
from tenacity import RetryError, retry, stop_after_attempt, wait_exponential_jitter

from storefront.logger import get_logger

logger = get_logger(__name__)

CATALOG_URL = os.getenv("CATALOG_URL", "https://fakestoreapi.com/products")
USER_AGENT = os.getenv("USER_AGENT", "shopeasy-ingest/1.0")
# Single attempt unless configured otherwise
FETCH_ATTEMPTS = max(1, int(os.getenv("FETCH_ATTEMPTS", "1")))
# Unset means no timeout
_timeout_raw = os.getenv("HTTP_TIMEOUT", "").strip()
HTTP_TIMEOUT = float(_timeout_raw) if _timeout_raw else None

SESSION = requests.Session()
SESSION.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})


class FetchError(Exception):
    """The remote product catalog could not be fetched."""


@retry(wait=wait_exponential_jitter(initial=1, max=30), stop=stop_after_attempt(FETCH_ATTEMPTS))
def _fetch(url: str) -> requests.Response:
    r = SESSION.get(url, timeout=HTTP_TIMEOUT)
    r.raise_for_status()
    return r


def fetch_products(url: str = CATALOG_URL) -> List[Dict[str, Any]]:
    """
    Fetch the full product collection. Raises FetchError on transport
    failure, non-success status, or a body that is not a JSON array.
    """
    logger.info("Fetching products from %s", url)
    try:
        resp = _fetch(url)
    except RetryError as e:
        cause = e.last_attempt.exception()
        raise FetchError(f"Catalog fetch from {url} failed: {cause}") from cause

    try:
        products = resp.json()
    except ValueError as e:
        raise FetchError(f"Catalog at {url} is not valid JSON: {e}") from e

    if not isinstance(products, list):
        raise FetchError(
            f"Catalog at {url} must be a JSON array, got {type(products).__name__}"
        )
    for p in products:
        if not isinstance(p, dict) or "id" not in p or "image" not in p:
            raise FetchError(f"Catalog entry is missing id/image: {p!r}")
        if not isinstance(p["image"], str):
            raise FetchError(f"Product {p['id']} has a non-text image URL: {p['image']!r}")

    logger.info("Fetched %d products", len(products))
    return products

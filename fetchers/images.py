# fetchers/images.py
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests

from storefront.logger import get_logger

from . import fakestore

logger = get_logger(__name__)

DEFAULT_EXTENSION = ".jpg"
DOWNLOAD_WORKERS = max(1, int(os.getenv("DOWNLOAD_WORKERS", "8")))
DOWNLOAD_CHUNK_SIZE = int(os.getenv("DOWNLOAD_CHUNK_SIZE", str(64 * 1024)))


class ImageDownloadError(Exception):
    """A single product image could not be downloaded."""

    def __init__(self, filename: str, message: str):
        super().__init__(f"{filename}: {message}")
        self.filename = filename
        self.message = message


@dataclass
class DownloadResult:
    product_id: Any
    filename: str
    path: str
    ok: bool
    error: Optional[str] = None


def image_extension(url: str) -> str:
    """Extension of the URL path, dot included; query and fragment ignored."""
    ext = os.path.splitext(urlparse(url).path)[1]
    return ext or DEFAULT_EXTENSION


def image_filename(product_id: Any, url: str) -> str:
    return f"product_{product_id}{image_extension(url)}"


def local_image_path(filename: str) -> str:
    return f"/images/{filename}"


def download_image(url: str, dest_path: str) -> None:
    """Stream one image to disk. Raises ImageDownloadError on any failure."""
    filename = os.path.basename(dest_path)
    try:
        with fakestore.SESSION.get(url, stream=True, timeout=fakestore.HTTP_TIMEOUT) as r:
            r.raise_for_status()
            with open(dest_path, "wb") as f:
                for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except (requests.RequestException, OSError) as e:
        raise ImageDownloadError(filename, str(e)) from e


def _download_one(product: Dict[str, Any], images_dir: str) -> DownloadResult:
    filename = image_filename(product["id"], product["image"])
    path = os.path.join(images_dir, filename)
    try:
        download_image(product["image"], path)
    except ImageDownloadError as e:
        logger.error("Error downloading image %s: %s", e.filename, e.message)
        return DownloadResult(product["id"], filename, path, ok=False, error=e.message)
    logger.debug("Saved %s", path)
    return DownloadResult(product["id"], filename, path, ok=True)


def download_images(
    products: List[Dict[str, Any]],
    images_dir: str,
    workers: int = DOWNLOAD_WORKERS,
) -> List[DownloadResult]:
    """
    Download every product image concurrently and wait for all of them.
    Failures are logged and reported in the results, never raised.
    """
    os.makedirs(images_dir, exist_ok=True)
    if not products:
        return []

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_download_one, p, images_dir) for p in products]
        results = [f.result() for f in futures]

    failed = sum(1 for r in results if not r.ok)
    logger.info(
        "Downloaded %d/%d images into %s", len(results) - failed, len(results), images_dir
    )
    return results


def rewrite_image_paths(products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copies of `products` with `image` pointing at the local file."""
    return [
        {**p, "image": local_image_path(image_filename(p["id"], p["image"]))}
        for p in products
    ]

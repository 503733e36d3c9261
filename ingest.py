import json
import os
import tempfile
from typing import Any, Dict, List

from storefront.logger import get_logger
from fetchers import SOURCES
from fetchers.fakestore import FetchError
from fetchers.images import download_images, rewrite_image_paths

logger = get_logger(__name__)

CATALOG_SOURCE = os.getenv("CATALOG_SOURCE", "fakestore").strip().lower()
IMAGES_DIR = os.getenv("IMAGES_DIR", "public/images")
CATALOG_PATH = os.getenv("CATALOG_PATH", "src/data/products.json")
CATALOG_MODE = 0o644


def write_catalog(products: List[Dict[str, Any]], path: str) -> None:
    """
    Replace the catalog file with `products`. The JSON goes to a temp file
    beside `path` first, so readers never see a half-written catalog.
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".products-", suffix=".json", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(products, f, indent=2, ensure_ascii=False)
        # mkstemp creates files as 0600
        os.chmod(tmp, CATALOG_MODE)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


def run_once(
    images_dir: str = IMAGES_DIR,
    catalog_path: str = CATALOG_PATH,
    source: str = CATALOG_SOURCE,
) -> int:
    fetcher = SOURCES.get(source)
    if not fetcher:
        logger.error("No catalog source registered as '%s'.", source)
        return 1

    try:
        products = fetcher()
    except FetchError as e:
        logger.error("Error fetching data: %s", e)
        return 1

    results = download_images(products, images_dir)
    failed = [r.filename for r in results if not r.ok]
    if failed:
        logger.warning(
            "%d image(s) failed to download; catalog still points at them: %s",
            len(failed), failed,
        )

    updated = rewrite_image_paths(products)

    try:
        write_catalog(updated, catalog_path)
    except OSError as e:
        logger.error("Failed to write catalog to %s: %s", catalog_path, e)
        return 1

    logger.info("Data saved to %s", catalog_path)
    logger.info("Images saved to %s", images_dir)
    logger.info("Data fetching completed successfully!")
    return 0


def main() -> int:
    try:
        return run_once()
    except Exception as e:
        logger.exception("Fatal ingestion error: %s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

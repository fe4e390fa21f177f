import logging
from concurrent.futures import ThreadPoolExecutor
import requests

logger = logging.getLogger(__name__)

MAX_IMAGE_WORKERS = 8


class ImageChecker:
    """Checks that image URLs still resolve to actual images."""

    def __init__(self, timeout: float = 10, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_valid(self, url: str) -> bool:
        try:
            resp = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.debug(f"Image check failed for {url}: {e}")
            return False
        content_type = resp.headers.get("Content-Type", "")
        return resp.ok and content_type.lower().startswith("image/")

    def invalid_urls(self, urls: list[str]) -> list[str]:
        if not urls:
            return []
        with ThreadPoolExecutor(max_workers=min(len(urls), MAX_IMAGE_WORKERS)) as executor:
            results = list(executor.map(self.is_valid, urls))
        return [url for url, ok in zip(urls, results) if not ok]

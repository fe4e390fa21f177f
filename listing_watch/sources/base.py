import logging
from abc import ABC, abstractmethod
from urllib.parse import urlencode
import requests
from bs4 import BeautifulSoup
from listing_watch.categories import category_code, is_valid_category
from listing_watch.errors import (
    InvalidQueryError,
    SourceAuthError,
    SourceProtocolError,
    SourceQuotaExceeded,
    SourceUnavailable,
)
from listing_watch.models import Listing

logger = logging.getLogger(__name__)

APIFY_BASE_URL = "https://api.apify.com/v2"


def search_url(
    city: str,
    category: str,
    keywords: list[str],
    min_price: float | None = None,
    max_price: float | None = None,
) -> str:
    params = {}
    if keywords:
        params["query"] = " ".join(keywords)
    if min_price is not None:
        params["min_price"] = int(min_price)
    if max_price is not None:
        params["max_price"] = int(max_price)
    url = f"https://{city}.craigslist.org/search/{category_code(category)}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url


def html_to_text(value) -> str:
    if not isinstance(value, str):
        return ""
    if "<" not in value:
        return value.strip()
    return BeautifulSoup(value, "html.parser").get_text(" ", strip=True)


def optional_str(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class SourceAdapter(ABC):
    """A listing backend that answers a search with canonical Listings."""

    name: str = ""
    supports_images: bool = False

    @abstractmethod
    def fetch(
        self,
        cities: list[str],
        category: str,
        keywords: list[str],
        limit: int,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Listing]:
        ...


class ApifyActorSource(SourceAdapter):
    """Runs an Apify actor synchronously and normalizes its dataset items.

    Subclasses name the actor, build its input body and map one raw item
    onto a Listing. Items missing any of ``required_fields`` (as strings)
    are dropped without raising.
    """

    actor_id: str = ""
    required_fields: tuple[str, ...] = ()

    def __init__(self, api_token: str, timeout: float = 120, session: requests.Session | None = None):
        self.api_token = api_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(
        self,
        cities: list[str],
        category: str,
        keywords: list[str],
        limit: int,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Listing]:
        if not cities:
            raise InvalidQueryError("No cities provided")
        if not is_valid_category(category):
            raise InvalidQueryError(f"Unknown category {category!r}")
        if not self.api_token:
            raise SourceAuthError("Apify API token is not configured", source=self.name)

        urls = [
            search_url(city, category, keywords, min_price, max_price)
            for city in cities
        ]
        logger.info(f"{self.name}: searching {len(urls)} url(s) limit={limit}")
        raw_items = self._run_actor(self.build_input(urls, limit))

        listings = []
        for item in raw_items:
            if not self._is_complete(item):
                logger.debug(f"{self.name}: dropping incomplete item {item!r:.200}")
                continue
            listings.append(self.normalize(item, category))

        logger.info(
            f"{self.name}: {len(listings)} valid of {len(raw_items)} raw items"
        )
        return listings[:limit]

    @abstractmethod
    def build_input(self, urls: list[str], limit: int) -> dict:
        ...

    @abstractmethod
    def normalize(self, item: dict, category: str) -> Listing:
        ...

    def _is_complete(self, item) -> bool:
        if not isinstance(item, dict):
            return False
        return all(isinstance(item.get(key), str) for key in self.required_fields)

    def _run_actor(self, payload: dict) -> list:
        url = f"{APIFY_BASE_URL}/acts/{self.actor_id}/run-sync-get-dataset-items"
        try:
            resp = self.session.post(
                url,
                params={"token": self.api_token},
                json=payload,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise SourceUnavailable(
                f"{self.name} timed out after {self.timeout}s", source=self.name
            ) from e
        except requests.RequestException as e:
            raise SourceUnavailable(
                f"{self.name} request failed: {e}", source=self.name
            ) from e

        status = resp.status_code
        if status == 401:
            raise SourceAuthError(
                "Invalid or missing Apify API token", source=self.name, status_code=status
            )
        if status in (402, 429):
            raise SourceQuotaExceeded(
                f"Apify quota exceeded ({status})", source=self.name, status_code=status
            )
        if not resp.ok:
            raise SourceUnavailable(
                f"Apify API error {status}: {resp.text[:200]}",
                source=self.name,
                status_code=status,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise SourceProtocolError(
                f"{self.name} returned a body that is not JSON", source=self.name
            ) from e
        if not isinstance(data, list):
            raise SourceProtocolError(
                f"{self.name} returned {type(data).__name__}, expected an array",
                source=self.name,
            )
        return data

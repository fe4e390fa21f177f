import logging
import time
from dataclasses import dataclass, field
from listing_watch.errors import InvalidQueryError, SourceAuthError, SourceError
from listing_watch.models import Listing
from listing_watch.sources.base import SourceAdapter

logger = logging.getLogger(__name__)


@dataclass
class ScrapeQuery:
    cities: list[str]
    category: str
    keywords: list[str] = field(default_factory=list)
    limit: int = 100
    min_price: float | None = None
    max_price: float | None = None

    def describe(self) -> str:
        return f"Scraping failed for {', '.join(self.cities)} - {self.category}"


class ScrapeOrchestrator:
    def __init__(
        self,
        sources: list[SourceAdapter],
        max_attempts: int = 3,
        retry_delay: float = 5,
        sleep=time.sleep,
    ):
        if not sources:
            raise ValueError("ScrapeOrchestrator needs at least one source")
        self.sources = list(sources)
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    def ordered_sources(self, preference: list[str] | None = None) -> list[SourceAdapter]:
        if preference is None:
            return sorted(self.sources, key=lambda s: not s.supports_images)
        if not preference:
            raise InvalidQueryError("Source preference is empty")
        by_name = {s.name: s for s in self.sources}
        unknown = [name for name in preference if name not in by_name]
        if unknown:
            raise InvalidQueryError(f"Unknown sources: {', '.join(unknown)}")
        return [by_name[name] for name in preference]

    def scrape(self, query: ScrapeQuery, preference: list[str] | None = None) -> list[Listing]:
        if not query.cities:
            raise InvalidQueryError("No cities provided")

        sources = self.ordered_sources(preference)
        listings: list[Listing] = []
        for position, source in enumerate(sources):
            is_last = position == len(sources) - 1
            try:
                listings = self._fetch_with_retry(source, query)
            except SourceAuthError as e:
                # Sources share the Apify token, so no fallback.
                e.add_context(query.describe())
                logger.error(f"{source.name}: authentication failed, not falling back")
                raise
            except Exception as e:
                if is_last:
                    if isinstance(e, SourceError):
                        e.add_context(query.describe())
                    logger.error(f"{source.name}: failed with no fallback left: {e}")
                    raise
                logger.warning(f"{source.name} failed, falling back: {e}")
                continue

            if listings:
                logger.info(f"{source.name}: returned {len(listings)} listings")
                return listings
            if not is_last:
                logger.warning(f"{source.name} returned no listings, falling back")

        return listings

    def _fetch_with_retry(self, source: SourceAdapter, query: ScrapeQuery) -> list[Listing]:
        attempt = 1
        while True:
            try:
                return source.fetch(
                    query.cities,
                    query.category,
                    query.keywords,
                    query.limit,
                    min_price=query.min_price,
                    max_price=query.max_price,
                )
            except SourceError as e:
                if not e.retryable or attempt >= self.max_attempts:
                    raise
                logger.warning(
                    f"{source.name}: attempt {attempt}/{self.max_attempts} failed ({e}), "
                    f"retrying in {self.retry_delay}s"
                )
                self._sleep(self.retry_delay)
                attempt += 1

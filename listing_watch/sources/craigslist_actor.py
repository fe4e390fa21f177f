from listing_watch.models import Listing
from listing_watch.sources.base import ApifyActorSource, html_to_text, optional_str

MAX_CONCURRENCY = 2


class CraigslistActorSource(ApifyActorSource):
    """Classic Craigslist actor: dependable, but no image metadata."""

    name = "craigslist"
    supports_images = False
    actor_id = "ivanvs~craigslist-scraper"
    required_fields = ("id", "title", "url", "datetime", "location")

    def build_input(self, urls: list[str], limit: int) -> dict:
        return {
            "urls": [{"url": u} for u in urls],
            "maxConcurrency": MAX_CONCURRENCY,
            "paginationEnabled": True,
            "proxyConfiguration": {"useApifyProxy": True},
            "maxItems": limit,
        }

    def normalize(self, item: dict, category: str) -> Listing:
        return Listing(
            id=item["id"],
            title=item["title"].strip(),
            url=item["url"],
            posted_at=item["datetime"],
            location=item["location"].strip(),
            category=category,
            description=html_to_text(item.get("post")),
            price=optional_str(item.get("price")),
        )

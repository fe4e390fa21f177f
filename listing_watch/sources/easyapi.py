from listing_watch.models import Listing
from listing_watch.sources.base import ApifyActorSource, html_to_text, optional_str


class EasyApiSource(ApifyActorSource):
    """Search-results actor that also returns gallery image URLs.

    Richer output, but the actor fails more often than the classic one.
    """

    name = "easyapi"
    supports_images = True
    actor_id = "easyapi~craigslist-search-results-scraper"
    required_fields = ("postId", "title", "postUrl", "postedTime", "location")

    def build_input(self, urls: list[str], limit: int) -> dict:
        return {
            "searchUrls": urls,
            "maxItems": limit,
            "proxyConfiguration": {"useApifyProxy": True},
        }

    def normalize(self, item: dict, category: str) -> Listing:
        images = [u for u in item.get("imageUrls") or [] if isinstance(u, str) and u]
        thumbnail = item.get("thumbnailUrl")
        if not images and isinstance(thumbnail, str) and thumbnail:
            images = [thumbnail]

        return Listing(
            id=item["postId"],
            title=item["title"].strip(),
            url=item["postUrl"],
            posted_at=item["postedTime"],
            location=item["location"].strip(),
            category=category,
            description=html_to_text(item.get("description")),
            price=optional_str(item.get("price")),
            images=images,
        )

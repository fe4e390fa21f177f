from dataclasses import dataclass, field
from datetime import datetime
from listing_watch.categories import SUPPORTED_CITIES, is_valid_category
from listing_watch.errors import InvalidAlertError

MAX_CITIES = 5
MAX_KEYWORDS = 10


@dataclass
class Listing:
    id: str
    title: str
    url: str
    posted_at: str
    location: str
    category: str
    description: str = ""
    price: str | None = None
    images: list[str] = field(default_factory=list)

    @property
    def fingerprint(self) -> str:
        return "|".join(
            [self.title.lower(), self.price or "", self.location.lower()]
        )


@dataclass
class Alert:
    id: str
    owner_id: str
    cities: list[str]
    category: str
    keywords: list[str] = field(default_factory=list)
    name: str = ""
    min_price: float | None = None
    max_price: float | None = None
    is_active: bool = True
    use_advanced_filter: bool = False
    plan: str = "free"
    last_check_at: datetime | None = None
    error_count: int = 0
    last_error: str | None = None

    def validate(self) -> None:
        if not self.cities:
            raise InvalidAlertError(f"Alert {self.id} has no cities")
        if len(self.cities) > MAX_CITIES:
            raise InvalidAlertError(
                f"Alert {self.id} has {len(self.cities)} cities (max {MAX_CITIES})"
            )
        unknown = [c for c in self.cities if c not in SUPPORTED_CITIES]
        if unknown:
            raise InvalidAlertError(
                f"Alert {self.id} has unsupported cities: {', '.join(unknown)}"
            )
        if not is_valid_category(self.category):
            raise InvalidAlertError(
                f"Alert {self.id} has unknown category {self.category!r}"
            )
        if len(self.keywords) > MAX_KEYWORDS:
            raise InvalidAlertError(
                f"Alert {self.id} has {len(self.keywords)} keywords (max {MAX_KEYWORDS})"
            )
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.max_price < self.min_price
        ):
            raise InvalidAlertError(
                f"Alert {self.id} max_price {self.max_price} is below min_price {self.min_price}"
            )


@dataclass
class AlertStatus:
    last_check_at: datetime
    error_count: int
    last_error: str | None = None


@dataclass
class FilterVerdict:
    accepted: bool = True
    reasons: list[str] = field(default_factory=list)
    ai_score: float | None = None
    invalid_image_urls: list[str] = field(default_factory=list)

    def reject(self, reason: str) -> None:
        self.accepted = False
        self.reasons.append(reason)


@dataclass
class CycleResult:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

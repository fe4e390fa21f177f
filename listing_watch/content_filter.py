import logging
import re
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from listing_watch.blacklist import find_blacklisted
from listing_watch.classifier import FAIL_OPEN_SCORE, RelevanceClassifier
from listing_watch.images import ImageChecker
from listing_watch.models import FilterVerdict, Listing

logger = logging.getLogger(__name__)

AI_REJECT_THRESHOLD = 0.4
MAX_TITLE_WORDS = 20
SHORTENER_PATTERN = re.compile(r"\b(bit\.ly|goo\.gl|tinyurl\.com)\b", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"\d{10}")


@dataclass
class FilterOptions:
    use_ai: bool = False
    dedupe_window_hours: float | None = None
    validate_images: bool = False
    spam_heuristics: bool = False
    batch_size: int = 10


class DedupCache:
    def __init__(self, clock=time.time):
        self._clock = clock
        self._entries: dict[str, set[float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def check_and_record(self, fingerprint: str, window_hours: float) -> bool:
        """True if seen inside the window, otherwise records now and returns False."""
        with self._lock:
            now = self._clock()
            self._sweep(now - window_hours * 3600)
            if self._entries.get(fingerprint):
                return True
            self._entries.setdefault(fingerprint, set()).add(now)
            return False

    def _sweep(self, cutoff: float) -> None:
        for key in list(self._entries):
            fresh = {ts for ts in self._entries[key] if ts > cutoff}
            if fresh:
                self._entries[key] = fresh
            else:
                del self._entries[key]


def spam_signals(listing: Listing) -> list[str]:
    title = listing.title
    # No "$" rule: prices in titles are normal. Capitalization counts letters
    # only and skips titles with fewer than 10 of them.
    signals = []
    if len(title.split()) > MAX_TITLE_WORDS:
        signals.append("Keyword stuffing in title")
    letters = [c for c in title if c.isalpha()]
    if len(letters) >= 10 and sum(c.isupper() for c in letters) > len(letters) * 0.5:
        signals.append("Excessive capitalization in title")
    if PHONE_PATTERN.search(title):
        signals.append("Phone number in title")
    if SHORTENER_PATTERN.search(f"{title} {listing.description}"):
        signals.append("Contains shortened link")
    return signals


class ContentFilter:
    def __init__(
        self,
        classifier: RelevanceClassifier | None = None,
        image_checker: ImageChecker | None = None,
        dedup_cache: DedupCache | None = None,
    ):
        self.classifier = classifier
        self.image_checker = image_checker or ImageChecker()
        self.dedup_cache = dedup_cache if dedup_cache is not None else DedupCache()

    def evaluate(self, listing: Listing, options: FilterOptions) -> FilterVerdict:
        # Every check runs; reasons accumulate instead of short-circuiting.
        verdict = FilterVerdict()

        phrases = find_blacklisted(f"{listing.title} {listing.description}")
        if phrases:
            verdict.reject(f"Contains blacklisted phrases: {', '.join(phrases)}")

        if options.dedupe_window_hours and self.dedup_cache.check_and_record(
            listing.fingerprint, options.dedupe_window_hours
        ):
            verdict.reject("Duplicate listing detected")

        if options.spam_heuristics:
            for signal in spam_signals(listing):
                verdict.reject(signal)

        if options.use_ai:
            score = self.classifier.score(listing) if self.classifier else FAIL_OPEN_SCORE
            verdict.ai_score = score
            if score < AI_REJECT_THRESHOLD:
                verdict.reject(f"Failed AI validation check (score {score:.2f})")

        if options.validate_images and listing.images:
            invalid = self.image_checker.invalid_urls(listing.images)
            verdict.invalid_image_urls = invalid
            if len(invalid) == len(listing.images):
                verdict.reject("No valid images found")

        return verdict

    def filter_many(self, listings: list[Listing], options: FilterOptions) -> list[Listing]:
        size = max(1, options.batch_size)
        accepted = []
        for start in range(0, len(listings), size):
            group = listings[start:start + size]
            with ThreadPoolExecutor(max_workers=len(group)) as executor:
                verdicts = list(executor.map(lambda l: self.evaluate(l, options), group))
            for listing, verdict in zip(group, verdicts):
                if verdict.accepted:
                    accepted.append(listing)
                else:
                    logger.debug(f"Rejected {listing.id}: {'; '.join(verdict.reasons)}")

        logger.info(f"Filtered {len(listings)} listings, {len(accepted)} accepted")
        return accepted

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from listing_watch.categories import results_cap
from listing_watch.content_filter import ContentFilter, FilterOptions
from listing_watch.models import Alert, AlertStatus, CycleResult, Listing
from listing_watch.orchestrator import ScrapeOrchestrator, ScrapeQuery
from listing_watch.store import AlertStore

logger = logging.getLogger(__name__)


class BatchProcessor:
    def __init__(
        self,
        store: AlertStore,
        orchestrator: ScrapeOrchestrator,
        content_filter: ContentFilter,
        batch_size: int = 5,
        batch_delay: float = 2,
        staleness: timedelta = timedelta(hours=1),
        dedupe_window_hours: float | None = 24,
        validate_images: bool = False,
        filter_batch_size: int = 10,
        max_listings: int = 100,
        clock=None,
        sleep=time.sleep,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.content_filter = content_filter
        self.batch_size = max(1, batch_size)
        self.batch_delay = batch_delay
        self.staleness = staleness
        self.dedupe_window_hours = dedupe_window_hours
        self.validate_images = validate_images
        self.filter_batch_size = filter_batch_size
        self.max_listings = max_listings
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep

    def run_cycle(self) -> CycleResult:
        alerts = self.store.get_due_alerts(self.staleness)
        result = CycleResult()
        if not alerts:
            logger.info("No alerts due")
            return result

        batches = [
            alerts[i:i + self.batch_size]
            for i in range(0, len(alerts), self.batch_size)
        ]
        logger.info(f"Processing {len(alerts)} due alerts in {len(batches)} batches")

        for number, batch in enumerate(batches, 1):
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                outcomes = list(executor.map(self._settle, batch))

            for error in outcomes:
                result.processed += 1
                if error is None:
                    result.succeeded += 1
                else:
                    result.failed += 1
                    result.errors.append(error)
            logger.info(f"Batch {number}/{len(batches)} done")

            if number < len(batches):
                self._sleep(self.batch_delay)

        logger.info(
            f"Cycle done. Processed: {result.processed}, "
            f"Succeeded: {result.succeeded}, Failed: {result.failed}"
        )
        return result

    def process_alert(self, alert: Alert) -> list[Listing]:
        alert.validate()
        query = ScrapeQuery(
            cities=alert.cities,
            category=alert.category,
            keywords=alert.keywords,
            limit=min(self.max_listings, results_cap(alert.plan)),
            min_price=alert.min_price,
            max_price=alert.max_price,
        )
        listings = self.orchestrator.scrape(query)
        accepted = self.content_filter.filter_many(listings, self.filter_options(alert))
        self.store.upsert_matches(alert.id, accepted)
        logger.info(
            f"Alert {alert.id}: {len(listings)} scraped, {len(accepted)} stored"
        )
        return accepted

    def filter_options(self, alert: Alert) -> FilterOptions:
        return FilterOptions(
            use_ai=alert.use_advanced_filter,
            dedupe_window_hours=self.dedupe_window_hours,
            validate_images=self.validate_images,
            spam_heuristics=alert.use_advanced_filter,
            batch_size=self.filter_batch_size,
        )

    def _settle(self, alert: Alert) -> str | None:
        # Errors stay with their own alert.
        try:
            self.process_alert(alert)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"Error processing alert {alert.id}: {message}")
            self._record(alert, AlertStatus(
                last_check_at=self._clock(),
                error_count=alert.error_count + 1,
                last_error=message,
            ))
            return message

        self._record(alert, AlertStatus(last_check_at=self._clock(), error_count=0))
        return None

    def _record(self, alert: Alert, status: AlertStatus) -> None:
        try:
            self.store.update_alert_status(alert.id, status)
        except Exception:
            logger.exception(f"Failed to update status for alert {alert.id}")

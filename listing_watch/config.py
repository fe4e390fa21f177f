import os

PIPELINE_CONFIG = {
    "batch_size": int(os.environ.get("BATCH_SIZE", "5")),
    "batch_delay_seconds": float(os.environ.get("BATCH_DELAY_SECONDS", "2")),
    "staleness_minutes": float(os.environ.get("STALENESS_MINUTES", "60")),
    "dedupe_window_hours": float(os.environ.get("DEDUPE_WINDOW_HOURS", "24")),
    "filter_batch_size": int(os.environ.get("FILTER_BATCH_SIZE", "10")),
    "validate_images": os.environ.get("VALIDATE_IMAGES", "0") == "1",
    "scrape_max_attempts": int(os.environ.get("SCRAPE_MAX_ATTEMPTS", "3")),
    "scrape_retry_delay_seconds": float(os.environ.get("SCRAPE_RETRY_DELAY_SECONDS", "5")),
    "source_timeout_seconds": float(os.environ.get("SOURCE_TIMEOUT_SECONDS", "120")),
    "max_listings_per_alert": int(os.environ.get("MAX_LISTINGS_PER_ALERT", "100")),
    "classifier_model": os.environ.get("CLASSIFIER_MODEL", "claude-haiku-4-5-20251001"),
}

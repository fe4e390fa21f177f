import os

os.environ.setdefault("BATCH_SIZE", "5")
os.environ.setdefault("BATCH_DELAY_SECONDS", "0")
os.environ.setdefault("STALENESS_MINUTES", "60")
os.environ.setdefault("DEDUPE_WINDOW_HOURS", "24")
os.environ.setdefault("SCRAPE_RETRY_DELAY_SECONDS", "0")
os.environ.setdefault("SOURCE_TIMEOUT_SECONDS", "5")

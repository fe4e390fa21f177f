import json
import logging
from datetime import timedelta
import boto3
from listing_watch.classifier import RelevanceClassifier
from listing_watch.config import PIPELINE_CONFIG
from listing_watch.content_filter import ContentFilter, DedupCache
from listing_watch.errors import ConfigurationError
from listing_watch.orchestrator import ScrapeOrchestrator
from listing_watch.processor import BatchProcessor
from listing_watch.sources.craigslist_actor import CraigslistActorSource
from listing_watch.sources.easyapi import EasyApiSource
from listing_watch.store import SheetsStore

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Survives across warm Lambda invocations so the dedup window spans cycles.
DEDUP_CACHE = DedupCache()


def get_secrets() -> dict:
    client = boto3.client("secretsmanager")

    google_resp = client.get_secret_value(SecretId="listing-watch/google-creds")
    google_creds = json.loads(google_resp["SecretString"])

    sheet_resp = client.get_secret_value(SecretId="listing-watch/google-sheet-id")
    sheet_id = json.loads(sheet_resp["SecretString"])["sheet_id"]

    apify_resp = client.get_secret_value(SecretId="listing-watch/apify-token")
    apify_token = json.loads(apify_resp["SecretString"])["api_token"]

    # The classifier is optional; without a key the AI check fails open.
    anthropic_key = ""
    try:
        anthropic_resp = client.get_secret_value(SecretId="listing-watch/anthropic-key")
        anthropic_key = json.loads(anthropic_resp["SecretString"])["api_key"]
    except client.exceptions.ResourceNotFoundException:
        logger.warning("No Anthropic key configured, relevance checks will pass everything")

    return {
        "google_creds": google_creds,
        "sheet_id": sheet_id,
        "apify_token": apify_token,
        "anthropic_key": anthropic_key,
    }


def build_processor(secrets: dict) -> BatchProcessor:
    if not secrets.get("apify_token"):
        raise ConfigurationError("Apify API token is required")
    if not secrets.get("sheet_id"):
        raise ConfigurationError("Google sheet id is required")

    timeout = PIPELINE_CONFIG["source_timeout_seconds"]
    orchestrator = ScrapeOrchestrator(
        sources=[
            EasyApiSource(secrets["apify_token"], timeout=timeout),
            CraigslistActorSource(secrets["apify_token"], timeout=timeout),
        ],
        max_attempts=PIPELINE_CONFIG["scrape_max_attempts"],
        retry_delay=PIPELINE_CONFIG["scrape_retry_delay_seconds"],
    )

    classifier = None
    if secrets.get("anthropic_key"):
        classifier = RelevanceClassifier(
            api_key=secrets["anthropic_key"],
            model=PIPELINE_CONFIG["classifier_model"],
        )

    return BatchProcessor(
        store=SheetsStore(
            credentials_dict=secrets["google_creds"],
            sheet_id=secrets["sheet_id"],
        ),
        orchestrator=orchestrator,
        content_filter=ContentFilter(classifier=classifier, dedup_cache=DEDUP_CACHE),
        batch_size=PIPELINE_CONFIG["batch_size"],
        batch_delay=PIPELINE_CONFIG["batch_delay_seconds"],
        staleness=timedelta(minutes=PIPELINE_CONFIG["staleness_minutes"]),
        dedupe_window_hours=PIPELINE_CONFIG["dedupe_window_hours"] or None,
        validate_images=PIPELINE_CONFIG["validate_images"],
        filter_batch_size=PIPELINE_CONFIG["filter_batch_size"],
        max_listings=PIPELINE_CONFIG["max_listings_per_alert"],
    )


def lambda_handler(event, context):
    logger.info("Listing check cycle starting")

    processor = build_processor(get_secrets())
    result = processor.run_cycle()

    logger.info(
        f"Done. Succeeded: {result.succeeded}, Failed: {result.failed}"
    )

    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "processed": result.processed,
                "succeeded": result.succeeded,
                "failed": result.failed,
                "errors": result.errors,
            }
        ),
    }

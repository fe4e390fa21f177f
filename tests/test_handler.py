import json
from unittest.mock import MagicMock, patch
import pytest
from listing_watch.errors import ConfigurationError
from listing_watch.models import CycleResult


def _secrets(**kwargs) -> dict:
    secrets = {
        "google_creds": {},
        "sheet_id": "sheet",
        "apify_token": "tok",
        "anthropic_key": "k",
    }
    secrets.update(kwargs)
    return secrets


@patch("listing_watch.handler.get_secrets")
@patch("listing_watch.handler.build_processor")
def test_handler_reports_cycle_result(mock_build, mock_secrets):
    from listing_watch.handler import lambda_handler

    mock_secrets.return_value = _secrets()
    mock_build.return_value.run_cycle.return_value = CycleResult(
        processed=3, succeeded=2, failed=1, errors=["Scraping failed for sfbay - software: down"]
    )

    response = lambda_handler({}, None)

    assert response["statusCode"] == 200
    body = json.loads(response["body"])
    assert body == {
        "processed": 3,
        "succeeded": 2,
        "failed": 1,
        "errors": ["Scraping failed for sfbay - software: down"],
    }


@patch("listing_watch.handler.SheetsStore")
@patch("listing_watch.handler.RelevanceClassifier")
def test_build_processor_wires_sources_in_order(mock_classifier_cls, mock_store_cls):
    from listing_watch.handler import DEDUP_CACHE, build_processor

    processor = build_processor(_secrets())

    names = [s.name for s in processor.orchestrator.ordered_sources()]
    assert names == ["easyapi", "craigslist"]
    assert processor.content_filter.classifier is mock_classifier_cls.return_value
    assert processor.content_filter.dedup_cache is DEDUP_CACHE
    mock_store_cls.assert_called_once_with(credentials_dict={}, sheet_id="sheet")


@patch("listing_watch.handler.SheetsStore")
@patch("listing_watch.handler.RelevanceClassifier")
def test_build_processor_without_anthropic_key(mock_classifier_cls, mock_store_cls):
    from listing_watch.handler import build_processor

    processor = build_processor(_secrets(anthropic_key=""))

    assert processor.content_filter.classifier is None
    mock_classifier_cls.assert_not_called()


@patch("listing_watch.handler.SheetsStore")
def test_build_processor_requires_apify_token(mock_store_cls):
    from listing_watch.handler import build_processor

    with pytest.raises(ConfigurationError):
        build_processor(_secrets(apify_token=""))


@patch("listing_watch.handler.boto3.client")
def test_get_secrets_reads_secrets_manager(mock_client_fn):
    from listing_watch.handler import get_secrets

    values = {
        "listing-watch/google-creds": {"type": "service_account"},
        "listing-watch/google-sheet-id": {"sheet_id": "sheet"},
        "listing-watch/apify-token": {"api_token": "tok"},
        "listing-watch/anthropic-key": {"api_key": "k"},
    }
    client = MagicMock()
    client.get_secret_value.side_effect = lambda SecretId: {
        "SecretString": json.dumps(values[SecretId])
    }
    mock_client_fn.return_value = client

    secrets = get_secrets()

    mock_client_fn.assert_called_once_with("secretsmanager")
    assert secrets == {
        "google_creds": {"type": "service_account"},
        "sheet_id": "sheet",
        "apify_token": "tok",
        "anthropic_key": "k",
    }

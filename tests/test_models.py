import pytest
from listing_watch.errors import InvalidAlertError
from listing_watch.models import Alert, FilterVerdict, Listing


def _make_alert(**kwargs) -> Alert:
    defaults = {
        "id": "a1",
        "owner_id": "u1",
        "cities": ["sfbay"],
        "category": "software",
        "keywords": ["macbook"],
    }
    defaults.update(kwargs)
    return Alert(**defaults)


def test_listing_defaults():
    listing = Listing(
        id="1",
        title="MacBook Pro 2019",
        url="https://sfbay.craigslist.org/sfc/sys/d/macbook/1.html",
        posted_at="2026-10-01T12:00:00Z",
        location="SF",
        category="electronics",
    )
    assert listing.posted_at == "2026-10-01T12:00:00Z"
    assert listing.description == ""
    assert listing.price is None
    assert listing.images == []


def test_fingerprint_is_case_insensitive_on_title_and_location():
    a = Listing("1", "MacBook Pro", "https://x/1", "t", "San Francisco", "electronics", price="$800")
    b = Listing("2", "macbook pro", "https://x/2", "t", "SAN FRANCISCO", "electronics", price="$800")
    assert a.fingerprint == b.fingerprint
    assert a.fingerprint == "macbook pro|$800|san francisco"


def test_fingerprint_differs_on_price():
    a = Listing("1", "Desk", "https://x/1", "t", "SF", "furniture", price="$50")
    b = Listing("2", "Desk", "https://x/2", "t", "SF", "furniture", price="$60")
    assert a.fingerprint != b.fingerprint


def test_valid_alert_passes():
    _make_alert().validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"cities": []},
        {"cities": ["sfbay", "seattle", "boston", "austin", "denver", "miami"]},
        {"cities": ["atlantis"]},
        {"category": "spaceships"},
        {"keywords": [f"k{i}" for i in range(11)]},
        {"min_price": 500, "max_price": 100},
    ],
)
def test_malformed_alert_is_rejected(overrides):
    with pytest.raises(InvalidAlertError):
        _make_alert(**overrides).validate()


def test_equal_min_and_max_price_is_allowed():
    _make_alert(min_price=100, max_price=100).validate()


def test_verdict_reject_accumulates_reasons():
    verdict = FilterVerdict()
    verdict.reject("one")
    verdict.reject("two")
    assert verdict.accepted is False
    assert verdict.reasons == ["one", "two"]

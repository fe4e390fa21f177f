import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
import gspread
from listing_watch.models import Alert, AlertStatus, Listing

logger = logging.getLogger(__name__)

ALERTS_TAB = "Alerts"
MATCHES_TAB = "Matches"

ALERT_HEADERS = [
    "id", "owner_id", "name", "cities", "category", "keywords",
    "min_price", "max_price", "is_active", "use_advanced_filter", "plan",
    "last_check_at", "error_count", "last_error",
]
STATUS_RANGE = "L{row}:N{row}"  # last_check_at, error_count, last_error

MATCH_HEADERS = [
    "alert_id", "listing_id", "title", "description", "url", "price",
    "posted_at", "location", "category", "images", "created_at",
]
MATCH_FIELDS_RANGE = "C{row}:J{row}"  # everything but the key and created_at


class AlertStore(ABC):
    @abstractmethod
    def get_due_alerts(self, staleness: timedelta) -> list[Alert]:
        ...

    @abstractmethod
    def upsert_matches(self, alert_id: str, listings: list[Listing]) -> None:
        ...

    @abstractmethod
    def update_alert_status(self, alert_id: str, status: AlertStatus) -> None:
        ...


def _parse_bool(value) -> bool:
    return str(value).strip().upper() in ("TRUE", "1", "YES")


def _parse_price(value) -> float | None:
    if value in ("", None):
        return None
    try:
        return float(str(value).replace("$", "").replace(",", ""))
    except ValueError:
        logger.warning(f"Ignoring unparseable price {value!r}")
        return None


def _parse_timestamp(value) -> datetime | None:
    if not value:
        return None
    try:
        ts = datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning(f"Ignoring unparseable timestamp {value!r}")
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _parse_count(value) -> int:
    if value in ("", None):
        return 0
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Ignoring unparseable error count {value!r}")
        return 0


def _split_list(value) -> list[str]:
    return [part.strip() for part in str(value).split(",") if part.strip()]


def alert_from_record(record: dict) -> Alert:
    return Alert(
        id=str(record["id"]),
        owner_id=str(record.get("owner_id", "")),
        name=str(record.get("name", "")),
        cities=[c.lower() for c in _split_list(record.get("cities", ""))],
        category=str(record.get("category", "")).strip(),
        keywords=_split_list(record.get("keywords", "")),
        min_price=_parse_price(record.get("min_price")),
        max_price=_parse_price(record.get("max_price")),
        is_active=_parse_bool(record.get("is_active", "")),
        use_advanced_filter=_parse_bool(record.get("use_advanced_filter", "")),
        plan=str(record.get("plan") or "free").strip().lower(),
        last_check_at=_parse_timestamp(record.get("last_check_at")),
        error_count=_parse_count(record.get("error_count")),
        last_error=str(record.get("last_error")) if record.get("last_error") else None,
    )


def match_fields(listing: Listing) -> list[str]:
    return [
        listing.title,
        listing.description,
        listing.url,
        listing.price or "",
        listing.posted_at,
        listing.location,
        listing.category,
        " ".join(listing.images),
    ]


class SheetsStore(AlertStore):
    def __init__(self, credentials_dict: dict, sheet_id: str, clock=None):
        gc = gspread.service_account_from_dict(credentials_dict)
        self.spreadsheet = gc.open_by_key(sheet_id)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def get_due_alerts(self, staleness: timedelta) -> list[Alert]:
        cutoff = self._clock() - staleness
        with self._lock:
            records = self.spreadsheet.worksheet(ALERTS_TAB).get_all_records()

        alerts = []
        for r in records:
            if r.get("id") in ("", None):
                continue
            try:
                alerts.append(alert_from_record(r))
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed alert row {r.get('id')!r}: {e}")
        due = [
            a for a in alerts
            if a.is_active and (a.last_check_at is None or a.last_check_at < cutoff)
        ]
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        due.sort(key=lambda a: a.last_check_at or epoch)
        return due

    def upsert_matches(self, alert_id: str, listings: list[Listing]) -> None:
        if not listings:
            return
        created_at = self._clock().isoformat()
        with self._lock:
            ws = self.spreadsheet.worksheet(MATCHES_TAB)
            rows = ws.get_all_values()
            existing = {
                (row[0], row[1]): number
                for number, row in enumerate(rows, 1)
                if number > 1 and len(row) >= 2
            }

            updates = []
            new_rows = []
            seen = set()
            for listing in listings:
                key = (alert_id, listing.id)
                if key in seen:
                    continue
                seen.add(key)
                if key in existing:
                    updates.append({
                        "range": MATCH_FIELDS_RANGE.format(row=existing[key]),
                        "values": [match_fields(listing)],
                    })
                else:
                    new_rows.append([alert_id, listing.id, *match_fields(listing), created_at])

            if updates:
                ws.batch_update(updates)
            if new_rows:
                ws.append_rows(new_rows, value_input_option="RAW")
        logger.info(
            f"Alert {alert_id}: {len(new_rows)} new matches, {len(updates)} refreshed"
        )

    def update_alert_status(self, alert_id: str, status: AlertStatus) -> None:
        with self._lock:
            ws = self.spreadsheet.worksheet(ALERTS_TAB)
            cell = ws.find(alert_id, in_column=1)
            if cell is None:
                raise LookupError(f"Alert {alert_id} not found in {ALERTS_TAB}")
            ws.update(
                range_name=STATUS_RANGE.format(row=cell.row),
                values=[[
                    status.last_check_at.isoformat(),
                    status.error_count,
                    status.last_error or "",
                ]],
            )

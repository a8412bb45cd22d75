"""
Timezone handling for the purchasing backend.

STORAGE: every persisted timestamp is a UTC-naive datetime (the canonical
form for the database layer, SQLite drops tzinfo anyway).

DISPLAY: purchase order datetimes cross the API as local civil datetimes
(no offset) in ONE process-wide zone, configured by APP_TIMEZONE and resolved
once when the app is built. Comparisons and sorting always happen on the
stored UTC value, never on formatted strings.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import Flask, current_app

# Wire format for local civil datetimes: yyyy-MM-dd'T'HH:mm:ss
API_LOCAL_FORMAT = "%Y-%m-%dT%H:%M:%S"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_TIMEZONE = "Asia/Jakarta"

_EXTENSION_KEY = "timezone_normalizer"


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _as_utc_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _has_offset(text: str) -> bool:
    if text.endswith("Z") or text.endswith("z"):
        return True
    # Offset suffix like +07:00 / -0300 after the time part
    time_part = text.partition("T")[2]
    return "+" in time_part or "-" in time_part


def parse_api_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an API datetime string without applying any zone.

    - None / "" -> None
    - "...Z" or "...+/-HH:MM" -> aware datetime (absolute)
    - "YYYY-MM-DDTHH:MM:SS" -> naive datetime (local civil, zone decided later)
    Anything else raises ValueError.
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if _has_offset(s):
        if s[-1] in "Zz":
            s = s[:-1] + "+00:00"
        return datetime.fromisoformat(s)
    return datetime.strptime(s, API_LOCAL_FORMAT)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class TimezoneNormalizer:
    """
    Converts between stored UTC instants and local civil datetimes of the
    configured zone.

    Local datetimes are naive and interpreted as wall-clock time in `zone`.
    Ambiguous wall times (DST fall-back) resolve to the earlier instant;
    wall times inside a DST gap do not round-trip.
    """
    zone: ZoneInfo

    @classmethod
    def from_name(cls, name: str) -> "TimezoneNormalizer":
        if not name or not name.strip():
            raise ValueError("Timezone name is required")
        try:
            return cls(zone=ZoneInfo(name.strip()))
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {name}")

    @property
    def name(self) -> str:
        return self.zone.key

    def now(self) -> datetime:
        return utcnow()

    def now_in_app_zone(self) -> datetime:
        return datetime.now(self.zone)

    def current_date(self) -> date:
        return self.now_in_app_zone().date()

    def current_time(self) -> time:
        return self.now_in_app_zone().time().replace(tzinfo=None)

    def to_local(self, instant: Optional[datetime]) -> Optional[datetime]:
        if instant is None:
            return None
        aware = instant.replace(tzinfo=timezone.utc) if instant.tzinfo is None else instant
        return aware.astimezone(self.zone).replace(tzinfo=None)

    def to_utc(self, local: Optional[datetime]) -> Optional[datetime]:
        if local is None:
            return None
        if local.tzinfo is not None:
            # Already absolute, the offset wins over the configured zone
            return _as_utc_naive(local)
        return local.replace(tzinfo=self.zone).astimezone(timezone.utc).replace(tzinfo=None)

    def format(self, instant: Optional[datetime]) -> Optional[str]:
        local = self.to_local(instant)
        return local.strftime(DISPLAY_FORMAT) if local is not None else None

    def format_for_api_local(self, instant: Optional[datetime]) -> Optional[str]:
        local = self.to_local(instant)
        return local.strftime(API_LOCAL_FORMAT) if local is not None else None

    def parse_local(self, value: Optional[str]) -> Optional[datetime]:
        """
        Parse a local civil datetime string (yyyy-MM-dd'T'HH:mm:ss).

        - None / "" -> None
        - anything else that does not match the pattern -> ValueError
        """
        if value is None:
            return None
        s = value.strip()
        if not s:
            return None
        if _has_offset(s):
            raise ValueError(f"Expected a local datetime without offset: {value}")
        return datetime.strptime(s, API_LOCAL_FORMAT)

    def parse_from_api(self, value: Optional[str]) -> Optional[datetime]:
        """
        Parse an API datetime string to a UTC-naive instant.

        - "...Z" or "...+/-HH:MM" is absolute and converted to UTC
        - a bare local datetime is interpreted in the configured zone
        """
        return self.to_utc(parse_api_datetime(value))

    def zone_offset(self) -> str:
        offset = self.now_in_app_zone().utcoffset()
        total_minutes = int(offset.total_seconds() // 60) if offset else 0
        if total_minutes == 0:
            return "Z"
        sign = "+" if total_minutes > 0 else "-"
        hours, minutes = divmod(abs(total_minutes), 60)
        return f"{sign}{hours:02d}:{minutes:02d}"

    def display_name(self) -> str:
        abbreviation = self.now_in_app_zone().tzname()
        return f"{self.name} ({abbreviation})" if abbreviation else self.name

    def is_today(self, instant: Optional[datetime]) -> bool:
        if instant is None:
            return False
        return self.to_local(instant).date() == self.current_date()

    def start_of_day(self, day: Optional[date]) -> Optional[datetime]:
        if day is None:
            return None
        return self.to_utc(datetime.combine(day, time.min))

    def end_of_day(self, day: Optional[date]) -> Optional[datetime]:
        if day is None:
            return None
        return self.to_utc(datetime.combine(day, time.max))


def init_timezone(app: Flask) -> TimezoneNormalizer:
    """Resolve APP_TIMEZONE once and pin it on the app."""
    normalizer = TimezoneNormalizer.from_name(app.config.get("APP_TIMEZONE") or DEFAULT_TIMEZONE)
    app.extensions[_EXTENSION_KEY] = normalizer
    return normalizer


def get_timezone() -> TimezoneNormalizer:
    return current_app.extensions[_EXTENSION_KEY]


# Shorthands bound to the current app's zone

def to_local(instant: Optional[datetime]) -> Optional[datetime]:
    return get_timezone().to_local(instant)


def to_utc(local: Optional[datetime]) -> Optional[datetime]:
    return get_timezone().to_utc(local)


def format_for_api_local(instant: Optional[datetime]) -> Optional[str]:
    return get_timezone().format_for_api_local(instant)

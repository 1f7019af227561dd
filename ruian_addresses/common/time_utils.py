"""UTC-focused helpers for run metadata and archive dates."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from ruian_addresses.common.errors import ConfigError


def utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


def default_archive_date(today: date | None = None) -> date:
    # Exports are published for the last day of each month.
    today = today or utc_today()
    return today.replace(day=1) - timedelta(days=1)


def parse_archive_date(value: str | None) -> date:
    if not value:
        return default_archive_date()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ConfigError(f"invalid --archive-date {value!r}") from exc


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")

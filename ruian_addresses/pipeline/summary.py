"""Run summary over a parsed address list."""

from __future__ import annotations

from pathlib import Path

from ruian_addresses.common.fs import write_json
from ruian_addresses.common.models import Address


def summarize_addresses(addresses: list[Address]) -> dict:
    towns = set()
    with_coordinates = 0
    with_street = 0
    earliest = None
    latest = None
    for address in addresses:
        towns.add(address.town_code)
        if address.location_x is not None and address.location_y is not None:
            with_coordinates += 1
        if address.street is not None:
            with_street += 1
        if earliest is None or address.valid_since < earliest:
            earliest = address.valid_since
        if latest is None or address.valid_since > latest:
            latest = address.valid_since

    total = len(addresses)
    return {
        "counts": {
            "addresses": total,
            "towns": len(towns),
            "with_coordinates": with_coordinates,
            "without_coordinates": total - with_coordinates,
            "with_street": with_street,
        },
        "quality": {
            "coordinate_coverage_percent": 0.0 if total == 0 else round((with_coordinates / total) * 100, 2),
        },
        "valid_since": {
            "earliest": earliest.isoformat() if earliest is not None else None,
            "latest": latest.isoformat() if latest is not None else None,
        },
    }


def write_run_summary(path: Path, run_id: str, archive: str, addresses: list[Address]) -> Path:
    payload = {"run_id": run_id, "archive": archive, **summarize_addresses(addresses)}
    write_json(path, payload)
    return path

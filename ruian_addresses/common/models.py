"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Address:
    """One RÚIAN address point (adresní místo)."""

    adm_code: int
    town_code: int
    town: str
    city_part_code: int | None
    city_part: str | None
    prague_part_code: int | None
    prague_part: str | None
    town_part_code: int
    town_part: str
    street_code: int | None
    street: str | None
    object_type: str
    number: int
    orientation_number: int | None
    orientation_number_sign: str | None
    zip_code: int
    location_x: float | None
    location_y: float | None
    valid_since: datetime

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["valid_since"] = self.valid_since.isoformat()
        return payload


@dataclass(frozen=True)
class ArchiveEntry:
    index: int
    name: str
    size: int


@dataclass(frozen=True)
class EntryPayload:
    index: int
    name: str
    data: bytes


@dataclass(frozen=True)
class EntryBatch:
    index: int
    name: str
    records: list[Address] = field(default_factory=list)

"""Header-keyed parsing of RÚIAN address CSV rows into Address records.

Each entry is a ``;`` separated table with a header row naming the columns
in Czech. Columns are resolved by header name once per entry, then every
data row is coerced cell by cell. Any bad row aborts the entry.
"""

from __future__ import annotations

import csv
import re
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Iterator

from ruian_addresses.common.constants import CSV_DELIMITER
from ruian_addresses.common.errors import DecodeError, RowParseError
from ruian_addresses.common.models import Address, EntryBatch, EntryPayload
from ruian_addresses.pipeline.decode import open_text

UINT32_MAX = 2**32 - 1
UINT64_MAX = 2**64 - 1

_DIGITS = re.compile(r"[0-9]+")
_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_FLOAT_SHAPE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class FieldSpec:
    header: str
    attribute: str
    kind: str
    optional: bool = False


FIELDS = (
    FieldSpec("Kód ADM", "adm_code", "uint32"),
    FieldSpec("Kód obce", "town_code", "uint32"),
    FieldSpec("Název obce", "town", "str"),
    FieldSpec("Kód MOMC", "city_part_code", "uint64", optional=True),
    FieldSpec("Název MOMC", "city_part", "str", optional=True),
    FieldSpec("Kód obvodu Prahy", "prague_part_code", "uint64", optional=True),
    FieldSpec("Název obvodu Prahy", "prague_part", "str", optional=True),
    FieldSpec("Kód části obce", "town_part_code", "uint32"),
    FieldSpec("Název části obce", "town_part", "str"),
    FieldSpec("Kód ulice", "street_code", "uint32", optional=True),
    FieldSpec("Název ulice", "street", "str", optional=True),
    FieldSpec("Typ SO", "object_type", "str"),
    FieldSpec("Číslo domovní", "number", "uint32"),
    FieldSpec("Číslo orientační", "orientation_number", "uint32", optional=True),
    FieldSpec("Znak čísla orientačního", "orientation_number_sign", "str", optional=True),
    FieldSpec("PSČ", "zip_code", "uint32"),
    FieldSpec("Souřadnice X", "location_x", "float", optional=True),
    FieldSpec("Souřadnice Y", "location_y", "float", optional=True),
    FieldSpec("Platí Od", "valid_since", "date"),
)


def _parse_unsigned(value: str, maximum: int) -> int:
    if not _DIGITS.fullmatch(value):
        raise ValueError(f"invalid unsigned integer {value!r}")
    number = int(value)
    if number > maximum:
        raise ValueError(f"{value} exceeds {maximum}")
    return number


def _parse_float(value: str) -> float:
    # float() alone also takes underscores and padding.
    if not _FLOAT_SHAPE.fullmatch(value):
        raise ValueError(f"invalid float {value!r}")
    return float(value)


def parse_valid_since(value: str) -> datetime:
    """Parse a ``YYYY-MM-DD`` cell as midnight UTC."""
    if not _DATE_SHAPE.fullmatch(value):
        raise ValueError(f"invalid date {value!r}, expected YYYY-MM-DD")
    # The cell carries no zone; pin it to UTC before parsing as an instant.
    return datetime.strptime(value + "Z", "%Y-%m-%d%z")


_COERCERS: dict[str, Callable[[str], object]] = {
    "uint32": lambda value: _parse_unsigned(value, UINT32_MAX),
    "uint64": lambda value: _parse_unsigned(value, UINT64_MAX),
    "float": _parse_float,
    "str": lambda value: value,
    "date": parse_valid_since,
}


def build_column_map(header: list[str]) -> dict[str, int]:
    positions = {name: index for index, name in enumerate(header)}
    missing = [
        field_spec.header
        for field_spec in FIELDS
        if not field_spec.optional and field_spec.header not in positions
    ]
    if missing:
        raise RowParseError(f"missing required columns: {', '.join(missing)}", row_number=1)
    return {
        field_spec.attribute: positions[field_spec.header]
        for field_spec in FIELDS
        if field_spec.header in positions
    }


def _coerce_row(cells: list[str], columns: dict[str, int]) -> Address:
    values: dict[str, object] = {}
    for field_spec in FIELDS:
        position = columns.get(field_spec.attribute)
        raw = cells[position] if position is not None else ""
        if field_spec.optional and raw == "":
            values[field_spec.attribute] = None
            continue
        try:
            values[field_spec.attribute] = _COERCERS[field_spec.kind](raw)
        except ValueError as exc:
            raise ValueError(f"column {field_spec.header!r}: {exc}") from None
    return Address(**values)


def parse_rows(
    lines: Iterable[str],
    *,
    entry_index: int | None = None,
    entry_name: str | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> Iterator[Address]:
    """Yield one Address per data row of a decoded entry."""
    reader = csv.reader(lines, delimiter=CSV_DELIMITER, strict=True)

    def _error(detail: str) -> RowParseError:
        return RowParseError(
            detail,
            entry_index=entry_index,
            entry_name=entry_name,
            row_number=reader.line_num,
        )

    try:
        header = next(reader, None)
        if header is None:
            return
        try:
            columns = build_column_map(header)
        except RowParseError as exc:
            raise _error(exc.detail) from exc
        width = len(header)
        for cells in reader:
            if should_stop is not None and should_stop():
                return
            if not cells:
                continue
            if len(cells) != width:
                raise _error(f"expected {width} fields, found {len(cells)}")
            try:
                yield _coerce_row(cells, columns)
            except ValueError as exc:
                raise _error(str(exc)) from exc
    except csv.Error as exc:
        raise _error(f"malformed CSV: {exc}") from exc


def parse_entry(
    payload: EntryPayload,
    errors: str = "strict",
    cancel_event: threading.Event | None = None,
) -> EntryBatch:
    """Decode and parse one entry; runs inside a worker lane."""
    text = open_text(payload.data, errors=errors)
    should_stop = cancel_event.is_set if cancel_event is not None else None
    try:
        records = list(
            parse_rows(
                text,
                entry_index=payload.index,
                entry_name=payload.name,
                should_stop=should_stop,
            )
        )
    except UnicodeDecodeError as exc:
        raise DecodeError(
            f"byte 0x{exc.object[exc.start]:02x} is not valid {exc.encoding}",
            entry_index=payload.index,
            entry_name=payload.name,
        ) from exc
    return EntryBatch(index=payload.index, name=payload.name, records=records)

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

SOURCE_HEADER = [
    "Kód ADM",
    "Kód obce",
    "Název obce",
    "Kód MOMC",
    "Název MOMC",
    "Kód obvodu Prahy",
    "Název obvodu Prahy",
    "Kód části obce",
    "Název části obce",
    "Kód ulice",
    "Název ulice",
    "Typ SO",
    "Číslo domovní",
    "Číslo orientační",
    "Znak čísla orientačního",
    "PSČ",
    "Souřadnice Y",
    "Souřadnice X",
    "Platí Od",
]

GOLCUV_JENIKOV = {
    "Kód ADM": "9382372",
    "Kód obce": "568864",
    "Název obce": "Golčův Jeníkov",
    "Kód MOMC": "",
    "Název MOMC": "",
    "Kód obvodu Prahy": "",
    "Název obvodu Prahy": "",
    "Kód části obce": "10004",
    "Název části obce": "Golčův Jeníkov",
    "Kód ulice": "387258",
    "Název ulice": "Nám. T. G. Masaryka",
    "Typ SO": "č.p.",
    "Číslo domovní": "110",
    "Číslo orientační": "",
    "Znak čísla orientačního": "",
    "PSČ": "58282",
    "Souřadnice Y": "664093.50",
    "Souřadnice X": "1086064.06",
    "Platí Od": "2011-07-01",
}


def make_row(**overrides: str) -> dict[str, str]:
    row = dict(GOLCUV_JENIKOV)
    row.update(overrides)
    return row


def numbered_rows(count: int, start: int = 1) -> list[dict[str, str]]:
    return [
        make_row(**{"Kód ADM": str(start + offset), "Číslo domovní": str(offset + 1)})
        for offset in range(count)
    ]


def csv_text(rows: list[dict[str, str]], header: list[str] | None = None) -> str:
    header = header or SOURCE_HEADER
    lines = [";".join(header)]
    for row in rows:
        lines.append(";".join(row.get(column, "") for column in header))
    return "\r\n".join(lines) + "\r\n"


def csv_bytes(rows: list[dict[str, str]], header: list[str] | None = None) -> bytes:
    return csv_text(rows, header).encode("cp1250")


def zip_bytes(entries: list[tuple[str, bytes]]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def write_archive(tmp_path: Path):
    def _write(entries: list[tuple[str, bytes]], name: str = "20240531_OB_ADR_csv.zip") -> Path:
        path = tmp_path / name
        path.write_bytes(zip_bytes(entries))
        return path

    return _write

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from ruian_addresses.common.config_loader import SourceConfig
from ruian_addresses.harvest.archive_download import archive_path, archive_url, fetch_archive


class FakeHttpClient:
    def __init__(self, body: bytes):
        self.body = body
        self.calls: list[tuple[str, Path]] = []

    def download(self, url: str, target_path: Path) -> Path:
        self.calls.append((url, target_path))
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_bytes(self.body)
        return target_path

    def close(self):
        return None


def test_archive_url_uses_compact_date():
    url = archive_url(date(2024, 5, 31), SourceConfig().url_template)
    assert url == "https://vdp.cuzk.cz/vymenny_format/csv/20240531_OB_ADR_csv.zip"


def test_archive_path_is_inside_cache_dir(tmp_path: Path):
    source = SourceConfig(cache_dir=tmp_path)
    assert archive_path(date(2024, 5, 31), source) == tmp_path / "20240531_OB_ADR_csv.zip"


@pytest.mark.integration
def test_fetch_archive_downloads_once_then_reuses_cache(tmp_path: Path):
    source = SourceConfig(cache_dir=tmp_path / "archives")
    client = FakeHttpClient(b"PK\x05\x06" + b"\x00" * 18)

    first = fetch_archive(date(2024, 5, 31), source, http_client=client)
    second = fetch_archive(date(2024, 5, 31), source, http_client=client)

    assert first == second == tmp_path / "archives" / "20240531_OB_ADR_csv.zip"
    assert len(client.calls) == 1
    assert client.calls[0][0].endswith("/20240531_OB_ADR_csv.zip")


@pytest.mark.integration
def test_fetch_archive_force_redownloads(tmp_path: Path):
    source = SourceConfig(cache_dir=tmp_path)
    client = FakeHttpClient(b"new")
    (tmp_path / "20240531_OB_ADR_csv.zip").write_bytes(b"old")

    path = fetch_archive(date(2024, 5, 31), source, http_client=client, force=True)

    assert path.read_bytes() == b"new"

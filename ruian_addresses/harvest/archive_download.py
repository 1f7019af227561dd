"""Download of the monthly RÚIAN address-point CSV archive."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from urllib.parse import urlparse

from ruian_addresses.common.config_loader import SourceConfig
from ruian_addresses.common.http import HttpClient


def archive_url(archive_date: date, url_template: str) -> str:
    return url_template.format(archive_date=archive_date.strftime("%Y%m%d"))


def archive_path(archive_date: date, source_config: SourceConfig) -> Path:
    url = archive_url(archive_date, source_config.url_template)
    basename = Path(urlparse(url).path).name or f"{archive_date:%Y%m%d}_OB_ADR_csv.zip"
    return source_config.cache_dir / basename


def fetch_archive(
    archive_date: date,
    source_config: SourceConfig,
    *,
    http_client: HttpClient | None = None,
    force: bool = False,
) -> Path:
    """Return the cached archive path, downloading it first when missing."""
    target = archive_path(archive_date, source_config)
    if target.exists() and not force:
        return target

    owns_client = http_client is None
    client = http_client or HttpClient(timeout=source_config.timeout, retry=source_config.retry)
    try:
        return client.download(archive_url(archive_date, source_config.url_template), target)
    finally:
        if owns_client:
            client.close()

from pathlib import Path

import pytest

from ruian_addresses.common.config_loader import PipelineOptions, load_config
from ruian_addresses.common.errors import ConfigError

BASE_CONFIG = """decoding:
  errors: strict
workers:
  executor: process
  max_workers: null
  max_buffered_entries: 0
source:
  url_template: "https://example.test/{archive_date}_OB_ADR_csv.zip"
  cache_dir: ./data/archives
  timeout:
    connect: 5
    read: 60
  retry:
    max_attempts: 3
    multiplier: 0.5
    max_wait: 10
logging:
  level: info
"""


def test_load_config_from_repo_config_dir():
    config = load_config(Path("config/pipeline.yml"))
    assert config.options == PipelineOptions()
    assert "{archive_date}" in config.source.url_template
    assert config.log_level == "INFO"


def test_load_config_builds_typed_bundle(tmp_path: Path):
    path = tmp_path / "pipeline.yml"
    path.write_text(BASE_CONFIG, encoding="utf-8")

    config = load_config(path)

    assert config.options.executor == "process"
    assert config.options.max_workers is None
    assert config.source.cache_dir == Path("data/archives")
    assert config.source.timeout.read == 60.0
    assert config.source.retry.max_attempts == 3
    assert config.log_level == "INFO"


def test_load_config_applies_overlay_values(tmp_path: Path):
    base = tmp_path / "pipeline.yml"
    overlay = tmp_path / "pipeline.local.yml"
    base.write_text(BASE_CONFIG, encoding="utf-8")
    overlay.write_text(
        """decoding:
  errors: replace
workers:
  executor: thread
  max_buffered_entries: 4
""",
        encoding="utf-8",
    )

    config = load_config(base, overlay_path=overlay)

    assert config.options == PipelineOptions(
        decode_errors="replace",
        executor="thread",
        max_workers=None,
        max_buffered_entries=4,
    )
    assert config.source.retry.max_wait == 10.0


def test_missing_overlay_is_ignored(tmp_path: Path):
    base = tmp_path / "pipeline.yml"
    base.write_text(BASE_CONFIG, encoding="utf-8")
    config = load_config(base, overlay_path=tmp_path / "absent.yml")
    assert config.options.decode_errors == "strict"


def test_missing_config_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yml")


def test_overlay_with_invalid_value_is_rejected(tmp_path: Path):
    base = tmp_path / "pipeline.yml"
    overlay = tmp_path / "overlay.yml"
    base.write_text(BASE_CONFIG, encoding="utf-8")
    overlay.write_text("workers:\n  max_workers: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(base, overlay_path=overlay)

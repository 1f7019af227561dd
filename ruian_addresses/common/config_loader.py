"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruian_addresses.common.constants import ARCHIVE_URL_TEMPLATE
from ruian_addresses.common.errors import ConfigError
from ruian_addresses.common.fs import read_yaml
from ruian_addresses.common.schema import validate_pipeline_config


@dataclass(frozen=True)
class PipelineOptions:
    decode_errors: str = "strict"
    executor: str = "process"
    max_workers: int | None = None
    max_buffered_entries: int = 0


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 20.0
    read: float = 300.0


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 5
    multiplier: float = 1.0
    max_wait: float = 30.0


@dataclass(frozen=True)
class SourceConfig:
    url_template: str = ARCHIVE_URL_TEMPLATE
    cache_dir: Path = Path("data/archives")
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)


@dataclass(frozen=True)
class PipelineConfig:
    options: PipelineOptions
    source: SourceConfig
    log_level: str = "INFO"


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path) or {}
    return _deep_merge(base, overlay)


def build_config(cfg: dict) -> PipelineConfig:
    workers = cfg["workers"]
    source = cfg["source"]
    options = PipelineOptions(
        decode_errors=cfg["decoding"]["errors"],
        executor=workers["executor"],
        max_workers=workers["max_workers"],
        max_buffered_entries=workers["max_buffered_entries"],
    )
    source_config = SourceConfig(
        url_template=source["url_template"],
        cache_dir=Path(source["cache_dir"]),
        timeout=TimeoutConfig(
            connect=float(source["timeout"]["connect"]),
            read=float(source["timeout"]["read"]),
        ),
        retry=RetryConfig(
            max_attempts=source["retry"]["max_attempts"],
            multiplier=float(source["retry"]["multiplier"]),
            max_wait=float(source["retry"]["max_wait"]),
        ),
    )
    return PipelineConfig(
        options=options,
        source=source_config,
        log_level=str(cfg["logging"]["level"]).upper(),
    )


def load_config(
    config_path: Path,
    *,
    allow_unknown: bool = False,
    overlay_path: Path | None = None,
) -> PipelineConfig:
    cfg = _load_yaml_with_overlay(config_path, overlay_path)
    return build_config(validate_pipeline_config(cfg, allow_unknown=allow_unknown))

"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from ruian_addresses.common.constants import DECODE_POLICIES, EXECUTOR_KINDS
from ruian_addresses.common.errors import ConfigError

TOP_LEVEL_KEYS = {"decoding", "workers", "source", "logging"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_choice(value: object, choices: tuple[str, ...] | set[str], ctx: str) -> None:
    if value not in choices:
        allowed = ", ".join(sorted(choices))
        raise ConfigError(f"{ctx} must be one of: {allowed} (got {value!r})")


def _assert_int(value: object, ctx: str, *, minimum: int, nullable: bool = False) -> None:
    if value is None and nullable:
        return
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigError(f"{ctx} must be an integer >= {minimum} (got {value!r})")


def _assert_positive_number(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number (got {value!r})")


def validate_pipeline_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "pipeline config")
    _assert_required_keys(cfg, TOP_LEVEL_KEYS, "pipeline config")
    _assert_no_unknown_keys(cfg, TOP_LEVEL_KEYS, "pipeline config", allow_unknown)

    decoding = _assert_mapping(cfg["decoding"], "decoding")
    _assert_required_keys(decoding, {"errors"}, "decoding")
    _assert_no_unknown_keys(decoding, {"errors"}, "decoding", allow_unknown)
    _assert_choice(decoding["errors"], DECODE_POLICIES, "decoding.errors")

    workers = _assert_mapping(cfg["workers"], "workers")
    worker_keys = {"executor", "max_workers", "max_buffered_entries"}
    _assert_required_keys(workers, worker_keys, "workers")
    _assert_no_unknown_keys(workers, worker_keys, "workers", allow_unknown)
    _assert_choice(workers["executor"], EXECUTOR_KINDS, "workers.executor")
    _assert_int(workers["max_workers"], "workers.max_workers", minimum=1, nullable=True)
    _assert_int(workers["max_buffered_entries"], "workers.max_buffered_entries", minimum=0)

    source = _assert_mapping(cfg["source"], "source")
    source_keys = {"url_template", "cache_dir", "timeout", "retry"}
    _assert_required_keys(source, source_keys, "source")
    _assert_no_unknown_keys(source, source_keys, "source", allow_unknown)
    if "{archive_date}" not in str(source["url_template"]):
        raise ConfigError("source.url_template must contain the {archive_date} placeholder")
    timeout = _assert_mapping(source["timeout"], "source.timeout")
    _assert_required_keys(timeout, {"connect", "read"}, "source.timeout")
    _assert_positive_number(timeout["connect"], "source.timeout.connect")
    _assert_positive_number(timeout["read"], "source.timeout.read")
    retry = _assert_mapping(source["retry"], "source.retry")
    _assert_required_keys(retry, {"max_attempts", "multiplier", "max_wait"}, "source.retry")
    _assert_int(retry["max_attempts"], "source.retry.max_attempts", minimum=1)
    _assert_positive_number(retry["multiplier"], "source.retry.multiplier")
    _assert_positive_number(retry["max_wait"], "source.retry.max_wait")

    logging_cfg = _assert_mapping(cfg["logging"], "logging")
    _assert_required_keys(logging_cfg, {"level"}, "logging")
    _assert_choice(str(logging_cfg["level"]).upper(), LOG_LEVELS, "logging.level")

    return cfg

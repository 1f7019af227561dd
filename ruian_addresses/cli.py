"""CLI entrypoint for the RÚIAN address archive parser."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from ruian_addresses.common.config_loader import PipelineConfig, load_config
from ruian_addresses.common.constants import (
    EXECUTOR_KINDS,
    EXIT_HARD_FAIL,
    EXIT_NOT_FOUND,
    EXIT_SUCCESS,
    STAGES,
)
from ruian_addresses.common.errors import ConfigError, PipelineError
from ruian_addresses.common.ids import generate_run_id
from ruian_addresses.common.logging import build_logger, log_event, log_failure
from ruian_addresses.common.time_utils import parse_archive_date
from ruian_addresses.harvest.archive_download import archive_path, fetch_archive
from ruian_addresses.pipeline.coordinates import address_lat_lon, within_czechia
from ruian_addresses.pipeline.parse import parse_addresses
from ruian_addresses.pipeline.summary import summarize_addresses, write_run_summary


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=list(STAGES))
    parser.add_argument("--archive", default=None)
    parser.add_argument("--archive-date", default=None)
    parser.add_argument("--adm-code", type=int, default=None)
    parser.add_argument("--config", default="./config/pipeline.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--data-dir", default=None)
    parser.add_argument("--summary-path", default=None)
    parser.add_argument("--executor", default=None, choices=list(EXECUTOR_KINDS))
    parser.add_argument("--max-workers", type=int, default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--force", action="store_true")
    return parser.parse_args(argv)


def _apply_overrides(config: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    options = config.options
    if args.executor is not None:
        options = replace(options, executor=args.executor)
    if args.max_workers is not None:
        if args.max_workers < 1:
            raise ConfigError("--max-workers must be >= 1")
        options = replace(options, max_workers=args.max_workers)
    return replace(config, options=options, log_level=args.log_level or config.log_level)


def _resolve_archive(args: argparse.Namespace, config: PipelineConfig) -> Path:
    if args.archive:
        return Path(args.archive)
    return archive_path(parse_archive_date(args.archive_date), config.source)


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def execute_command(args: argparse.Namespace, config: PipelineConfig, logger, run_id: str) -> int:
    if args.command == "fetch":
        archive_date = parse_archive_date(args.archive_date)
        path = fetch_archive(archive_date, config.source, force=args.force)
        log_event(logger, f"archive available at {path}", run_id=run_id, stage="fetch", event="FETCH_END", status="ok")
        return EXIT_SUCCESS

    archive = _resolve_archive(args, config)
    addresses = parse_addresses(archive, config.options, logger=logger)

    if args.command == "parse":
        if args.summary_path:
            write_run_summary(Path(args.summary_path), run_id, str(archive), addresses)
        _print_json({"run_id": run_id, "archive": str(archive), **summarize_addresses(addresses)})
        return EXIT_SUCCESS

    if args.command == "lookup":
        if args.adm_code is None:
            raise ConfigError("lookup requires --adm-code")
        for address in addresses:
            if address.adm_code == args.adm_code:
                payload = address.to_dict()
                lat_lon = address_lat_lon(address)
                payload["wgs84"] = None
                if lat_lon is not None:
                    lat, lon = lat_lon
                    payload["wgs84"] = {"lat": lat, "lon": lon, "in_czechia": within_czechia(lat, lon)}
                _print_json(payload)
                return EXIT_SUCCESS
        log_event(logger, f"no address with code {args.adm_code}", run_id=run_id, stage="lookup", event="LOOKUP_MISS", status="warn")
        return EXIT_NOT_FOUND

    raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config = load_config(
        Path(args.config),
        overlay_path=Path(args.overlay_config) if args.overlay_config else None,
    )
    config = _apply_overrides(config, args)
    data_dir = Path(args.data_dir) if args.data_dir else None
    logger = build_logger(run_id, data_dir=data_dir, level=config.log_level)

    log_event(logger, "command start", run_id=run_id, stage=args.command, event="COMMAND_START", status="ok")
    try:
        exit_code = execute_command(args, config, logger, run_id)
    except PipelineError as exc:
        log_failure(
            logger,
            f"command failed: {exc}",
            run_id=run_id,
            stage=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    log_event(logger, "command end", run_id=run_id, stage=args.command, event="COMMAND_END", status="ok")
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())

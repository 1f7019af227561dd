"""Public entry point: ZIP of RÚIAN CSV tables to a list of Address records."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import BinaryIO

from ruian_addresses.common.config_loader import PipelineOptions
from ruian_addresses.common.errors import PipelineError
from ruian_addresses.common.logging import get_logger, log_event, log_failure
from ruian_addresses.common.models import Address
from ruian_addresses.pipeline.aggregate import RecordAggregator
from ruian_addresses.pipeline.archive import open_archive
from ruian_addresses.pipeline.distribute import WorkDistributor


def parse_addresses(
    source: str | Path | BinaryIO,
    options: PipelineOptions | None = None,
    *,
    logger: logging.Logger | None = None,
) -> list[Address]:
    """Parse every CSV entry of a RÚIAN address archive.

    Args:
        source: Path to the ZIP file, or a readable and seekable binary stream.
        options: Decode policy and worker pool settings.
        logger: Structured logger; defaults to the package logger.

    Returns:
        All records of all entries. Order is not defined.

    Raises:
        SourceIOError: If the source cannot be opened or read.
        ArchiveFormatError: If the source is not a ZIP or an entry is corrupt.
        DecodeError: If an entry holds bytes outside Windows-1250 (strict policy).
        RowParseError: If any row of any entry fails to parse.
    """
    options = options or PipelineOptions()
    logger = logger or get_logger("parse")
    started = time.monotonic()
    aggregator = RecordAggregator()

    try:
        with open_archive(source) as archive:
            log_event(
                logger,
                f"opened archive with {len(archive)} entries",
                stage="parse",
                event="ARCHIVE_OPEN",
                status="ok",
            )
            WorkDistributor(options, logger).run(archive, aggregator)
        records = aggregator.collect()
    except PipelineError as exc:
        log_failure(
            logger,
            f"archive parse failed: {exc}",
            stage="parse",
            event="PARSE_FAIL",
            status="error",
            error_code=exc.error_code,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        raise

    log_event(
        logger,
        "archive parsed",
        stage="parse",
        event="PARSE_END",
        status="ok",
        rows_out=len(records),
        duration_ms=int((time.monotonic() - started) * 1000),
    )
    return records

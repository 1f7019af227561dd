"""Largest-first dispatch of archive entries to a pool of parsing lanes.

The calling thread is the only reader of the archive: it decompresses
entries one after another and submits each fully materialised payload to
an executor. Lanes never share bytes and finish by handing one closed batch
to the aggregator.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from functools import partial
from typing import Callable, Iterable

from ruian_addresses.common.config_loader import PipelineOptions
from ruian_addresses.common.errors import ConfigError, PipelineError
from ruian_addresses.common.logging import get_logger, log_event
from ruian_addresses.common.models import ArchiveEntry, EntryBatch, EntryPayload
from ruian_addresses.pipeline.aggregate import RecordAggregator
from ruian_addresses.pipeline.archive import EntryArchive
from ruian_addresses.pipeline.rows import parse_entry


def order_entries(entries: Iterable[ArchiveEntry]) -> list[ArchiveEntry]:
    return sorted(entries, key=lambda entry: (-entry.size, entry.index))


def resolve_worker_count(max_workers: int | None) -> int:
    if max_workers is not None:
        return max_workers
    return os.cpu_count() or 1


class WorkDistributor:
    def __init__(self, options: PipelineOptions | None = None, logger: logging.Logger | None = None) -> None:
        self.options = options or PipelineOptions()
        self.logger = logger or get_logger("distribute")
        self.cancel_event = threading.Event()

    def _build_executor(self, workers: int) -> Executor:
        if self.options.executor == "process":
            return ProcessPoolExecutor(max_workers=workers)
        if self.options.executor == "thread":
            return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ruian-parse")
        raise ConfigError(f"Unknown executor kind: {self.options.executor!r}")

    def _lane(self) -> Callable[[EntryPayload], EntryBatch]:
        if self.options.executor == "thread":
            return partial(parse_entry, errors=self.options.decode_errors, cancel_event=self.cancel_event)
        # Events cannot cross process boundaries; process lanes finish their entry.
        return partial(parse_entry, errors=self.options.decode_errors)

    def _on_done(
        self,
        entry: ArchiveEntry,
        aggregator: RecordAggregator,
        slots: threading.Semaphore | None,
        started: float,
        future: Future,
    ) -> None:
        try:
            if future.cancelled():
                return
            error = future.exception()
            if error is not None:
                if aggregator.fail(error):
                    self.cancel_event.set()
                return
            batch = future.result()
            aggregator.add_batch(batch)
            log_event(
                self.logger,
                f"parsed entry {entry.name}",
                stage="parse",
                entry=entry.name,
                event="ENTRY_PARSED",
                status="ok",
                rows_out=len(batch.records),
                duration_ms=int((time.monotonic() - started) * 1000),
            )
        finally:
            if slots is not None:
                slots.release()

    def run(self, archive: EntryArchive, aggregator: RecordAggregator) -> RecordAggregator:
        # One cancel signal per run.
        self.cancel_event = threading.Event()
        entries = order_entries(archive.entries())
        workers = resolve_worker_count(self.options.max_workers)
        bound = self.options.max_buffered_entries
        slots = threading.Semaphore(bound) if bound > 0 else None
        lane = self._lane()
        futures: list[Future] = []

        with self._build_executor(workers) as executor:
            for entry in entries:
                if aggregator.failed:
                    break
                if slots is not None:
                    slots.acquire()
                    if aggregator.failed:
                        slots.release()
                        break
                started = time.monotonic()
                try:
                    data = archive.read(entry)
                except PipelineError as exc:
                    if slots is not None:
                        slots.release()
                    if aggregator.fail(exc):
                        self.cancel_event.set()
                    break
                log_event(
                    self.logger,
                    f"read entry {entry.name}",
                    stage="read",
                    entry=entry.name,
                    event="ENTRY_READ",
                    status="ok",
                    bytes=len(data),
                )
                future = executor.submit(lane, EntryPayload(index=entry.index, name=entry.name, data=data))
                future.add_done_callback(partial(self._on_done, entry, aggregator, slots, started))
                futures.append(future)

            if aggregator.failed:
                for future in futures:
                    future.cancel()

        return aggregator

"""Thread-safe collection of per-entry record batches."""

from __future__ import annotations

import threading

from ruian_addresses.common.models import Address, EntryBatch


class RecordAggregator:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._batches: list[EntryBatch] = []
        self._failure: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self._failure is not None

    @property
    def failure(self) -> BaseException | None:
        return self._failure

    @property
    def entry_count(self) -> int:
        return len(self._batches)

    @property
    def record_count(self) -> int:
        with self._lock:
            return sum(len(batch.records) for batch in self._batches)

    def add_batch(self, batch: EntryBatch) -> None:
        with self._lock:
            if self._failure is None:
                self._batches.append(batch)

    def fail(self, error: BaseException) -> bool:
        """Record a failure; only the first one is kept."""
        with self._lock:
            if self._failure is not None:
                return False
            self._failure = error
            self._batches.clear()
            return True

    def collect(self) -> list[Address]:
        with self._lock:
            if self._failure is not None:
                raise self._failure
            records: list[Address] = []
            for batch in self._batches:
                records.extend(batch.records)
            return records

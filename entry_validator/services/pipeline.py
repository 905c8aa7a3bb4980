from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterator
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Generic, TypeVar

from ..excel.reader import RowSource, open_excel_source
from ..models.config_models import DEFAULT_QUEUE_SIZE, DEFAULT_WORKERS, ValidatorConfig
from ..models.entry import Entry
from ..models.lined_error import LinedError
from ..models.processing_result import RunResult
from ..models.row import Row
from ..models.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from ..validation.errors import EntryError, UnexpectedRowError
from ..validation.parser import parse_entry

"""Concurrent ingestion pipeline.

One producer thread walks every sheet of the Row Source in declared order and
feeds data rows (header row 0 skipped) into a bounded input queue. N worker
threads pull rows, run parse + validate as one step and publish the outcome on
either the entry stream or the error stream.

Shutdown ordering: after the producer has enqueued every row it posts one
end-of-input marker per worker, waits for all workers to finish, and only then
closes both output streams. A consumer therefore never observes end-of-stream
before every outcome has been published.

State transitions: idle -> running -> draining -> closed
"""

__all__ = [
    "PipelineError",
    "PipelineState",
    "RecordStream",
    "PipelineRun",
    "EntryPipeline",
    "process_row",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Queue markers
_END_OF_INPUT = object()
_END_OF_STREAM = object()


class PipelineError(Exception):
    """Raised for pipeline misuse or when the row source fails mid-run."""


class PipelineState(Enum):
    """Lifecycle of a PipelineRun.

    - IDLE: created, no worker started
    - RUNNING: workers started, producer enqueuing rows
    - DRAINING: producer finished, workers finishing in-flight rows
    - CLOSED: all workers terminated, both output streams closed
    """
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    CLOSED = "closed"


class RecordStream(Generic[T]):
    """Unbounded output stream terminated by an explicit end marker.

    Iterating blocks until an item is available and stops once the stream has
    been closed and every published item has been consumed.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._queue: queue.Queue[Any] = queue.Queue()
        self._lock = threading.Lock()
        self._published = 0
        self._closed = False

    @property
    def published(self) -> int:
        """Number of items published so far."""
        with self._lock:
            return self._published

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def publish(self, item: T) -> None:
        with self._lock:
            if self._closed:
                raise PipelineError(f"stream '{self.name}' is closed")
            self._published += 1
        self._queue.put(item)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_END_OF_STREAM)

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _END_OF_STREAM:
                # Put the marker back so other consumers (or a later loop) also stop
                self._queue.put(_END_OF_STREAM)
                return
            yield item

    def drain(self) -> list[T]:
        """Consume the stream to its end and return the items."""
        return list(self)


def process_row(row: Row, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Entry | LinedError:
    """Run parse + validate for one row, never raising.

    This is the per-row recovery boundary: rule violations become a LinedError
    carrying the violation, and any unexpected fault becomes a LinedError
    carrying ``UnexpectedRowError``.

    Args:
        row: Row to process
        vocabulary: Categorical tables for validation

    Returns:
        The validated Entry, or a LinedError tagged with the row's page/line
    """
    try:
        return parse_entry(row.cells, vocabulary)
    except EntryError as e:
        return LinedError(page=row.page, line=row.line, error=e)
    except Exception as e:
        logger.warning("unexpected fault at %s:%d: %r", row.page, row.line, e)
        return LinedError(page=row.page, line=row.line, error=UnexpectedRowError(e))


class PipelineRun:
    """A single execution of the pipeline over one Row Source.

    Consumers read ``entries`` and ``errors``; both are unbounded, so they may
    be drained one after the other from the same thread.
    """

    def __init__(
        self,
        source: RowSource,
        *,
        workers: int,
        queue_size: int,
        vocabulary: Vocabulary,
        close_source: bool = False,
    ) -> None:
        self.source = source
        self.workers = workers
        self.queue_size = queue_size
        self.vocabulary = vocabulary
        self.entries: RecordStream[Entry] = RecordStream("entries")
        self.errors: RecordStream[LinedError] = RecordStream("errors")

        self._close_source = close_source
        self._input: queue.Queue[Any] = queue.Queue(maxsize=queue_size)
        self._state = PipelineState.IDLE
        self._state_lock = threading.Lock()
        self._closed_event = threading.Event()
        self._executor: ThreadPoolExecutor | None = None
        self._futures: list[Future[None]] = []
        self._producer: threading.Thread | None = None

        # Written by the producer thread only
        self.total_rows = 0
        self.total_sheets = 0
        self.skipped_sheets = 0
        self.source_error: BaseException | None = None  # also set by a dead worker
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None

    @property
    def state(self) -> PipelineState:
        with self._state_lock:
            return self._state

    def _set_state(self, state: PipelineState) -> None:
        with self._state_lock:
            logger.debug("pipeline state %s -> %s", self._state.value, state.value)
            self._state = state

    def start(self) -> PipelineRun:
        """Start the workers and the producer (idle -> running)."""
        with self._state_lock:
            if self._state is not PipelineState.IDLE:
                raise PipelineError(f"pipeline run already started (state={self._state.value})")
            self._state = PipelineState.RUNNING

        self.start_time = datetime.now(UTC)
        logger.debug("pipeline start workers=%d queue_size=%d", self.workers, self.queue_size)

        self._executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="entry-worker")
        self._futures = [self._executor.submit(self._work) for _ in range(self.workers)]
        self._producer = threading.Thread(target=self._produce_and_close, name="entry-producer", daemon=True)
        self._producer.start()
        return self

    def _work(self) -> None:
        while True:
            item = self._input.get()
            if item is _END_OF_INPUT:
                return
            outcome = process_row(item, self.vocabulary)
            if isinstance(outcome, LinedError):
                self.errors.publish(outcome)
            else:
                self.entries.publish(outcome)

    def _produce(self) -> None:
        sheet_names = self.source.sheet_names()
        self.total_sheets = len(sheet_names)
        for sheet_name in sheet_names:
            try:
                rows = self.source.rows(sheet_name)
            except Exception as e:
                # Sheet-level failure: skip the sheet, keep the run going
                logger.warning("skipping sheet %s: %s", sheet_name, e)
                self.skipped_sheets += 1
                continue

            for position, cells in rows:
                if position == 0:  # header row
                    continue
                # Blocks while the queue is full (backpressure)
                self._input.put(Row(page=sheet_name, line=position, cells=tuple(cells)))
                self.total_rows += 1

    def _produce_and_close(self) -> None:
        try:
            self._produce()
        except Exception as e:
            logger.error("row source failed, no further rows enqueued: %s", e)
            self.source_error = e
        finally:
            self._set_state(PipelineState.DRAINING)
            for _ in self._futures:
                self._input.put(_END_OF_INPUT)
            wait(self._futures)
            for future in self._futures:
                error = future.exception()
                if error is not None:
                    logger.error("worker failed: %r", error)
                    if self.source_error is None:
                        self.source_error = error
            assert self._executor is not None
            self._executor.shutdown(wait=True)
            if self._close_source:
                try:
                    self.source.close()
                except Exception as e:
                    logger.warning("failed to close row source: %s", e)

            self.entries.close()
            self.errors.close()
            self.end_time = datetime.now(UTC)
            self._set_state(PipelineState.CLOSED)
            logger.debug(
                "pipeline closed rows=%d valid=%d errors=%d skipped_sheets=%d",
                self.total_rows,
                self.entries.published,
                self.errors.published,
                self.skipped_sheets,
            )
            self._closed_event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the run is closed. Returns False on timeout."""
        return self._closed_event.wait(timeout)

    def collect(self, *, sort_errors: bool = False) -> tuple[list[Entry], list[LinedError]]:
        """Drain both streams.

        Args:
            sort_errors: Stable sort the errors by (page, line) instead of
                completion order

        Returns:
            (entries, errors)
        """
        entries = self.entries.drain()
        errors = self.errors.drain()
        if sort_errors:
            errors.sort(key=LinedError.sort_key)
        return entries, errors

    def result(self, timeout: float | None = None) -> RunResult:
        """Wait for closure and return the run metrics.

        Raises:
            PipelineError: on timeout, if the row source failed while listing
                sheets or producing rows, or if a worker died
        """
        if not self.wait(timeout):
            raise PipelineError("pipeline did not close within timeout")
        if self.source_error is not None:
            raise PipelineError(f"pipeline run failed: {self.source_error}") from self.source_error
        assert self.start_time is not None and self.end_time is not None
        return RunResult.build(
            total_rows=self.total_rows,
            valid_entries=self.entries.published,
            errors=self.errors.published,
            total_sheets=self.total_sheets,
            skipped_sheets=self.skipped_sheets,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class EntryPipeline:
    """Orchestrator: opens the source and starts one PipelineRun per call.

    Args:
        workers: Worker pool size (positive, no upper bound enforced)
        queue_size: Capacity of the bounded input queue
        vocabulary: Categorical tables for validation
    """

    def __init__(
        self,
        workers: int = DEFAULT_WORKERS,
        *,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ) -> None:
        if workers < 1:
            raise PipelineError(f"workers must be a positive integer, got {workers}")
        if queue_size < 1:
            raise PipelineError(f"queue_size must be a positive integer, got {queue_size}")
        self.workers = workers
        self.queue_size = queue_size
        self.vocabulary = vocabulary

    @classmethod
    def from_config(cls, config: ValidatorConfig) -> EntryPipeline:
        return cls(config.workers, queue_size=config.queue_size, vocabulary=config.vocabulary)

    def run(self, source: RowSource, *, close_source: bool = False) -> PipelineRun:
        """Start processing ``source`` and return the running PipelineRun."""
        run = PipelineRun(
            source,
            workers=self.workers,
            queue_size=self.queue_size,
            vocabulary=self.vocabulary,
            close_source=close_source,
        )
        return run.start()

    def parse_file(
        self,
        path: Path | str,
        opener: Callable[[Path | str], RowSource] = open_excel_source,
    ) -> PipelineRun:
        """Open the workbook at ``path`` and process it.

        Raises:
            SourceOpenError: the workbook cannot be opened; no worker is started
        """
        source = opener(path)
        return self.run(source, close_source=True)

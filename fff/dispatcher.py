"""Dispatcher wiring input lines through fetching, filtering and export."""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from functools import partial
from threading import BoundedSemaphore, Lock
from typing import Callable, Iterable

import structlog

from .config import FetchConfig
from .engine import (
    BaseExporter,
    FetchOutcome,
    FetchSuccess,
    Fetcher,
    FileExporter,
    RequestSpec,
    SaveReason,
    render_headers,
    should_save,
)
from .errors import ConfigurationError, MalformedURLError, OutputDirectoryError
from .ui import StatusReporter

EXIT_OK = 0
EXIT_SETUP_FAILURE = 1
EXIT_CONFIG_ERROR = 2


@dataclass(slots=True)
class ProcessingResult:
    url: str
    status: str
    status_code: int | None = None
    reason: str | None = None
    path: str | None = None


@dataclass(slots=True)
class RunSummary:
    dispatched: int = 0
    saved: int = 0
    not_saved: int = 0
    failed: int = 0
    write_failed: int = 0
    malformed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class RunState:
    """Slot and pacing bookkeeping for one run; only the dispatcher touches it."""

    concurrency_limit: int
    delay: float
    inflight: int = 0
    peak_inflight: int = 0
    next_dispatch_at: float = 0.0
    summary: RunSummary = field(default_factory=RunSummary)
    _lock: Lock = field(default_factory=Lock, repr=False)
    _slots: BoundedSemaphore = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._slots = BoundedSemaphore(self.concurrency_limit)

    def acquire_slot(self) -> None:
        self._slots.acquire()

    def reserve_dispatch(self, now: float) -> float:
        """Claim the next dispatch instant and return how long to wait for it."""

        with self._lock:
            dispatch_at = max(now, self.next_dispatch_at)
            self.next_dispatch_at = dispatch_at + self.delay
            return dispatch_at - now

    def mark_dispatched(self) -> None:
        with self._lock:
            self.inflight += 1
            self.peak_inflight = max(self.peak_inflight, self.inflight)
            self.summary.dispatched += 1

    def mark_finished(self, result: ProcessingResult | None) -> None:
        with self._lock:
            self.inflight -= 1
            if result is None:
                self.summary.failed += 1
            elif result.status in ("saved", "duplicate"):
                self.summary.saved += 1
            elif result.status == "skipped":
                self.summary.not_saved += 1
            elif result.status == "write_failed":
                self.summary.write_failed += 1
            else:
                self.summary.failed += 1
        self._slots.release()

    def mark_malformed(self) -> None:
        with self._lock:
            self.summary.malformed += 1


def _decode_line(line: str | bytes) -> str:
    if isinstance(line, bytes):
        return line.decode("utf-8")
    return line


class Dispatcher:
    """Feed URLs to a bounded pool of fetch workers at a paced rate."""

    def __init__(
        self,
        config: FetchConfig,
        fetcher: Fetcher | None = None,
        exporter: BaseExporter | None = None,
        reporter: StatusReporter | None = None,
        logger: structlog.BoundLogger | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.exporter = exporter or FileExporter(config.output_dir)
        self.reporter = reporter or StatusReporter(enabled=False)
        self.logger = logger or structlog.get_logger("fff.dispatcher")
        self._clock = clock
        self._sleep = sleep
        self.state: RunState | None = None

    @property
    def summary(self) -> RunSummary | None:
        return self.state.summary if self.state is not None else None

    def run(self, lines: Iterable[str | bytes]) -> int:
        owns_fetcher = self.fetcher is None
        try:
            fetcher = self.fetcher or Fetcher.from_config(self.config)
        except ConfigurationError as exc:
            self.logger.error("configuration_error", error=str(exc))
            return EXIT_CONFIG_ERROR
        try:
            self.exporter.prepare()
        except OutputDirectoryError as exc:
            self.logger.error("output_dir_unavailable", error=str(exc))
            if owns_fetcher:
                fetcher.close()
            return EXIT_SETUP_FAILURE

        state = RunState(concurrency_limit=self.config.concurrency, delay=self.config.delay)
        self.state = state
        executor = ThreadPoolExecutor(
            max_workers=self.config.concurrency, thread_name_prefix="fff-worker"
        )
        try:
            for line in lines:
                try:
                    url = _decode_line(line).strip()
                except UnicodeDecodeError:
                    self.logger.warning(
                        "malformed_url",
                        url=line.decode("utf-8", errors="backslashreplace").strip(),
                        reason="not valid UTF-8",
                    )
                    state.mark_malformed()
                    continue
                if not url:
                    continue
                try:
                    spec = RequestSpec.from_config(url, self.config)
                except MalformedURLError:
                    self.logger.warning("malformed_url", url=url)
                    state.mark_malformed()
                    continue
                state.acquire_slot()
                wait = state.reserve_dispatch(self._clock())
                if wait > 0:
                    self._sleep(wait)
                state.mark_dispatched()
                future = executor.submit(self._process, fetcher, spec)
                future.add_done_callback(partial(self._on_done, state, spec.url))
        finally:
            executor.shutdown(wait=True)
            if owns_fetcher:
                fetcher.close()
            self.exporter.close()
        self.logger.info("run_complete", **state.summary.as_dict())
        return EXIT_OK

    def _on_done(self, state: RunState, url: str, future: "Future[ProcessingResult]") -> None:
        exc = future.exception()
        if exc is not None:
            self.logger.error("worker_error", url=url, error=str(exc), exc_info=exc)
            state.mark_finished(None)
            return
        state.mark_finished(future.result())

    def _process(self, fetcher: Fetcher, spec: RequestSpec) -> ProcessingResult:
        outcome = fetcher.fetch(spec)
        result = self._handle_outcome(spec, outcome)
        self.reporter.report(result)
        return result

    def _handle_outcome(self, spec: RequestSpec, outcome: FetchOutcome) -> ProcessingResult:
        decision = should_save(outcome, self.config)
        if not isinstance(outcome, FetchSuccess):
            return ProcessingResult(url=spec.url, status="failed", reason=outcome.reason)
        if not decision:
            if decision.reason in (SaveReason.IGNORED_HTML, SaveReason.IGNORED_EMPTY):
                self.logger.debug("save_suppressed", url=spec.url, reason=decision.reason.value)
            return ProcessingResult(
                url=spec.url,
                status="skipped",
                status_code=outcome.status,
                reason=decision.reason.value,
            )
        record = self.exporter.record_for(
            spec.url, outcome.body, headers_text=render_headers(spec, outcome)
        )
        try:
            written = self.exporter.export(record)
        except OSError as exc:
            self.logger.error("write_failed", url=spec.url, path=str(record.path), error=str(exc))
            return ProcessingResult(
                url=spec.url,
                status="write_failed",
                status_code=outcome.status,
                reason=f"write failed: {exc}",
                path=str(record.path),
            )
        if not written:
            self.logger.debug("already_saved", url=spec.url, path=str(record.path))
        return ProcessingResult(
            url=spec.url,
            status="saved" if written else "duplicate",
            status_code=outcome.status,
            reason=decision.reason.value,
            path=str(record.path),
        )


def run(urls: Iterable[str | bytes], config: FetchConfig) -> int:
    """Fetch every URL in ``urls`` with ``config`` and return the exit code."""

    return Dispatcher(config).run(urls)


__all__ = [
    "Dispatcher",
    "EXIT_CONFIG_ERROR",
    "EXIT_OK",
    "EXIT_SETUP_FAILURE",
    "ProcessingResult",
    "RunState",
    "RunSummary",
    "run",
]

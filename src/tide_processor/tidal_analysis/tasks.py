"""
Deferred, cancelable execution of harmonic analyses.

Analyses over the full constituent table take long enough to block an
interactive caller, so :class:`AnalysisRunner` runs them on a single worker
thread.  Submitting a new analysis supersedes the pending one: its future is
cancelled if it has not started, and its cancellation event is set so a
running estimator stops at the next constituent.  Only the newest task may
publish its result.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from ..series.observations import TideSeries
from .harmonic_analysis import (
    AnalysisCancelled,
    HarmonicAnalysisResult,
    harmonic_analysis,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisHandle:
    """Caller-side handle on one submitted analysis."""

    task_id: int
    method: str
    future: Future
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def cancel(self) -> None:
        self.cancel_event.set()
        self.future.cancel()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set() or self.future.cancelled()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: float | None = None) -> HarmonicAnalysisResult | None:
        """
        Wait for the analysis.

        Returns ``None`` for an empty window or a cancelled task; re-raises
        any fault raised by the estimator.
        """
        if self.future.cancelled():
            return None
        return self.future.result(timeout=timeout)

    @property
    def error(self) -> BaseException | None:
        if not self.future.done() or self.future.cancelled():
            return None
        return self.future.exception()


class AnalysisRunner:
    """
    Single-worker executor publishing only the most recent analysis.

    Parameters
    ----------
    delay_seconds : float, optional
        Grace period before a task starts; a newer submission arriving in
        that window replaces it without doing any work (default 0).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.
    """

    def __init__(
        self,
        delay_seconds: float = 0.0,
        logger: logging.Logger | None = None,
    ):
        self._log = logger or logging.getLogger(__name__)
        self._delay = delay_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='harmonic-analysis',
        )
        self._lock = threading.Lock()
        self._counter = 0
        self._current: AnalysisHandle | None = None
        self._latest: HarmonicAnalysisResult | None = None

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------
    def __enter__(self) -> AnalysisRunner:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def latest_result(self) -> HarmonicAnalysisResult | None:
        """Result of the newest successful analysis, if any."""
        with self._lock:
            return self._latest

    @property
    def current(self) -> AnalysisHandle | None:
        with self._lock:
            return self._current

    def submit(
        self,
        series: TideSeries,
        method: str = 'simplified',
        **options,
    ) -> AnalysisHandle:
        """
        Schedule an analysis of *series*, superseding any pending one.

        Parameters
        ----------
        series : TideSeries
            Analysis window.
        method : str, optional
            Analysis method (see
            :func:`~tide_processor.tidal_analysis.harmonic_analysis.harmonic_analysis`).
        **options
            Method-specific keyword arguments.

        Returns
        -------
        AnalysisHandle
        """
        with self._lock:
            if self._current is not None and not self._current.done():
                self._log.info('Superseding analysis task %d.',
                               self._current.task_id)
                self._current.cancel()
            self._counter += 1
            task_id = self._counter
            cancel_event = threading.Event()
            future = self._executor.submit(
                self._run, task_id, series, method, cancel_event, options,
            )
            handle = AnalysisHandle(task_id, method, future, cancel_event)
            self._current = handle
        return handle

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._current is not None:
                self._current.cancel()
        self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------
    def _run(
        self,
        task_id: int,
        series: TideSeries,
        method: str,
        cancel_event: threading.Event,
        options: dict,
    ) -> HarmonicAnalysisResult | None:
        if self._delay > 0 and cancel_event.wait(self._delay):
            self._log.info('Analysis task %d cancelled before start.', task_id)
            return None

        try:
            result = harmonic_analysis(
                series, method=method, logger=self._log,
                cancel_event=cancel_event, **options,
            )
        except AnalysisCancelled:
            self._log.info('Analysis task %d cancelled.', task_id)
            return None
        except Exception:
            self._log.exception('Harmonic analysis task %d failed.', task_id)
            raise

        with self._lock:
            if result is not None and task_id == self._counter:
                self._latest = result
            elif result is not None:
                self._log.info('Discarding result of superseded task %d.',
                               task_id)
        return result

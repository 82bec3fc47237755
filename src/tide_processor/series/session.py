"""
Immutable processing session.

:class:`SessionState` bundles everything a front end needs between user
actions: the loaded series, the undo history, the latest interval report,
the analysis window and the last analysis result.  Every operation returns a
new state; the receiver is never modified, so a failed operation leaves the
caller holding the previous state.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field

import pandas as pd

from ..tidal_analysis.harmonic_analysis import (
    HarmonicAnalysisResult,
    harmonic_analysis,
)
from .date_formats import DISPLAY_FORMAT, format_display, parse_timestamp
from .downsampling import History, downsample_with_history, undo
from .export import export_text
from .intervals import IntervalReport, check_interval, interpolate_gaps, interval_to_ms
from .observations import TideSeries, interpolated_indices, neighbourhood
from .parsing import ParseWarning, parse_series

logger = logging.getLogger(__name__)


class InvalidDateRangeError(ValueError):
    """A manual date range could not be applied."""


class AnalysisError(RuntimeError):
    """The harmonic analysis failed; no result was published."""


@dataclass(frozen=True)
class SessionState:
    series: TideSeries = field(default_factory=TideSeries)
    history: History = ()
    interval_report: IntervalReport | None = None
    window: tuple[float, float] = (0.0, 100.0)
    date_format: str = 'yyyy/mm/dd hh:mm'
    export_format: str = DISPLAY_FORMAT
    warnings: tuple[ParseWarning, ...] = ()
    analysis_result: HarmonicAnalysisResult | None = None

    # ------------------------------------------------------------------
    # Loading and settings
    # ------------------------------------------------------------------
    def load_text(
        self,
        text: str,
        date_format: str | None = None,
        logger: logging.Logger | None = None,
    ) -> SessionState:
        """
        Parse *text* and start over with the new series.

        History, interval report and analysis result are discarded and the
        window is reset to the full series.
        """
        date_format = date_format or self.date_format
        parsed = parse_series(text, date_format, logger=logger)
        return dataclasses.replace(
            self,
            series=parsed.series,
            history=(),
            interval_report=None,
            window=(0.0, 100.0),
            date_format=date_format,
            warnings=parsed.warnings,
            analysis_result=None,
        )

    # ------------------------------------------------------------------
    # Interval validation, interpolation, downsampling
    # ------------------------------------------------------------------
    def check_interval(
        self,
        amount: float | str,
        unit: str,
        logger: logging.Logger | None = None,
    ) -> SessionState:
        expected_ms = interval_to_ms(amount, unit)
        report = check_interval(self.series, expected_ms, logger=logger)
        return dataclasses.replace(self, interval_report=report)

    def interpolate(self, logger: logging.Logger | None = None) -> SessionState:
        """Fill the gaps of the current report, then clear the report."""
        if self.interval_report is None or not self.interval_report.issues:
            return self
        series = interpolate_gaps(self.series, self.interval_report, logger=logger)
        return dataclasses.replace(self, series=series, interval_report=None)

    def downsample(
        self,
        amount: float | str,
        unit: str,
        logger: logging.Logger | None = None,
    ) -> SessionState:
        target_ms = interval_to_ms(amount, unit)
        if len(self.series) == 0:
            return self
        series, history = downsample_with_history(
            self.series, self.history, target_ms, logger=logger,
        )
        return dataclasses.replace(
            self, series=series, history=history, interval_report=None,
        )

    def undo(self) -> SessionState:
        if not self.history:
            return self
        series, history = undo(self.series, self.history)
        return dataclasses.replace(
            self, series=series, history=history, interval_report=None,
        )

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    # ------------------------------------------------------------------
    # Window
    # ------------------------------------------------------------------
    def set_window(self, start_pct: float, end_pct: float) -> SessionState:
        lo = min(max(float(start_pct), 0.0), 100.0)
        hi = min(max(float(end_pct), 0.0), 100.0)
        return dataclasses.replace(self, window=(lo, hi))

    def apply_date_range(self, start_text: str, end_text: str) -> SessionState:
        """
        Set the window from two ``dd/mm/yyyy hh:mm:ss`` dates.

        The window starts at the first observation at or after the start
        date and ends before the first observation after the end date.

        Raises
        ------
        InvalidDateRangeError
            If either date cannot be parsed or the end precedes the start.
        """
        try:
            start = parse_timestamp(start_text, DISPLAY_FORMAT)
            end = parse_timestamp(end_text, DISPLAY_FORMAT)
        except ValueError as exc:
            raise InvalidDateRangeError(
                'Invalid date format. Please use dd/mm/yyyy hh:mm:ss format.'
            ) from exc
        if end < start:
            raise InvalidDateRangeError('The end date precedes the start date.')

        n = len(self.series)
        if n == 0:
            return self
        times = self.series.times
        start_idx = int(times.searchsorted(start, side='left'))
        end_idx = int(times.searchsorted(end, side='right'))
        return self.set_window(start_idx / n * 100.0, end_idx / n * 100.0)

    def window_dates(self) -> tuple[str, str] | None:
        """Display-formatted first and last date inside the window."""
        n = len(self.series)
        if n == 0:
            return None
        start, end = self.series.window_bounds(*self.window)
        first = self.series[min(start, n - 1)].timestamp
        last = self.series[max(min(end - 1, n - 1), 0)].timestamp
        return format_display(first), format_display(last)

    @property
    def windowed_series(self) -> TideSeries:
        return self.series.window(*self.window)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def chart_view(self) -> pd.DataFrame:
        return self.windowed_series.chart_view()

    def interpolation_views(self) -> list[TideSeries]:
        """The +/- 2 h neighbourhood of every synthesized observation."""
        return [neighbourhood(self.series, i)
                for i in interpolated_indices(self.series)]

    def export_text(self) -> str:
        return export_text(self.series, self.export_format)

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------
    def analyze(
        self,
        method: str = 'simplified',
        logger: logging.Logger | None = None,
        **options,
    ) -> SessionState:
        """
        Run a harmonic analysis over the window.

        An empty window keeps the previous result.  Configuration errors
        (unknown method, missing latitude) propagate as ``ValueError``; any
        other failure is logged and raised as :class:`AnalysisError`.
        """
        _log = logger or logging.getLogger(__name__)
        window = self.windowed_series
        if len(window) == 0:
            _log.info('Analysis window is empty; keeping previous result.')
            return self

        try:
            result = harmonic_analysis(window, method=method, logger=_log,
                                       **options)
        except ValueError:
            raise
        except Exception as exc:
            _log.exception('Harmonic analysis failed.')
            raise AnalysisError('Error performing harmonic analysis.') from exc

        if result is None:
            return self
        return dataclasses.replace(self, analysis_result=result)

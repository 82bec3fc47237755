"""
Sampling-interval validation and linear gap filling.

:func:`check_interval` compares every consecutive time step with the
expected sampling interval and reports the ones that are off by more than
one second.  :func:`interpolate_gaps` then fills the reported gaps with
linearly interpolated points, flagged ``interpolated=True`` so they can be
told apart from real readings.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .observations import Observation, TideSeries

logger = logging.getLogger(__name__)

TOLERANCE_MS = 1000.0
"""Deviation from the expected interval tolerated without a report."""

_UNIT_MS = {
    'seconds': 1000.0,
    'minutes': 60.0 * 1000.0,
    'hours': 60.0 * 60.0 * 1000.0,
    'days': 24.0 * 60.0 * 60.0 * 1000.0,
}


def interval_to_ms(amount: float | str, unit: str) -> float:
    """
    Convert an interval given as amount + unit to milliseconds.

    Raises
    ------
    ValueError
        If *unit* is not one of seconds/minutes/hours/days or *amount* is
        not a finite number.
    """
    try:
        factor = _UNIT_MS[unit.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown interval unit '{unit}'. Expected one of: "
            f"{', '.join(_UNIT_MS)}."
        ) from None
    value = float(amount)
    if not math.isfinite(value):
        raise ValueError(f"Interval amount must be finite, got {amount!r}.")
    return value * factor


@dataclass(frozen=True)
class IntervalIssue:
    """A consecutive pair whose spacing differs from the expected interval."""

    line1: float
    line2: float
    date1: str
    date2: str
    expected_sec: float
    actual_sec: float


@dataclass(frozen=True)
class IntervalReport:
    expected_interval_ms: float
    total: int
    issues: tuple[IntervalIssue, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.issues


def _step_ms(series: TideSeries) -> np.ndarray:
    """Milliseconds between consecutive observations."""
    times = series.times
    return np.asarray((times[1:] - times[:-1]) / pd.Timedelta(milliseconds=1),
                      dtype=float)


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def check_interval(
    series: TideSeries,
    expected_interval_ms: float,
    logger: logging.Logger | None = None,
) -> IntervalReport | None:
    """
    Report every time step deviating from *expected_interval_ms*.

    Parameters
    ----------
    series : TideSeries
        Sorted observations.
    expected_interval_ms : float
        Expected sampling interval in milliseconds
        (see :func:`interval_to_ms`).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    IntervalReport or None
        ``None`` when the series has fewer than two observations.  Otherwise
        ``total`` is the number of steps checked and ``issues`` lists each
        step with ``|actual - expected| > 1000 ms``, in series order.
    """
    _log = logger or logging.getLogger(__name__)
    if len(series) < 2:
        _log.info('Interval check skipped: fewer than 2 observations.')
        return None

    steps = _step_ms(series)
    bad = np.flatnonzero(np.abs(steps - expected_interval_ms) > TOLERANCE_MS)
    issues = tuple(
        IntervalIssue(
            line1=series[i].source_line,
            line2=series[i + 1].source_line,
            date1=series[i].formatted,
            date2=series[i + 1].formatted,
            expected_sec=expected_interval_ms / 1000.0,
            actual_sec=float(steps[i]) / 1000.0,
        )
        for i in bad
    )

    _log.info(
        'Interval check: %d of %d steps deviate from %.0f s.',
        len(issues), len(steps), expected_interval_ms / 1000.0,
    )
    return IntervalReport(expected_interval_ms, len(steps), issues)


def interpolate_gaps(
    series: TideSeries,
    report: IntervalReport | None,
    logger: logging.Logger | None = None,
) -> TideSeries:
    """
    Fill the gaps found by :func:`check_interval` by linear interpolation.

    For a gap of ``actual`` ms with an expected step of ``expected`` ms,
    ``round(actual / expected) - 1`` points are inserted at
    ``prev + j * expected`` with values interpolated between the two
    boundary readings.  Inserted points carry ``source_line = prev + 0.5``.

    Parameters
    ----------
    series : TideSeries
        The series the report was computed on.
    report : IntervalReport or None
        Most recent interval report.  With no report or no issues the input
        series is returned unchanged.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    TideSeries
        New series including the synthesized observations.
    """
    _log = logger or logging.getLogger(__name__)
    if report is None or not report.issues:
        return series

    expected = report.expected_interval_ms
    if expected <= 0:
        _log.warning('Cannot interpolate with a non-positive interval.')
        return series

    step = pd.Timedelta(milliseconds=expected)
    steps = _step_ms(series)
    result: list[Observation] = [series[0]] if len(series) else []
    inserted = 0
    for i, actual in enumerate(steps):
        prev, curr = series[i], series[i + 1]
        if abs(actual - expected) > TOLERANCE_MS:
            missing = _round_half_up(actual / expected) - 1
            for j in range(1, missing + 1):
                ratio = j / (missing + 1)
                result.append(Observation(
                    timestamp=prev.timestamp + j * step,
                    value=prev.value + (curr.value - prev.value) * ratio,
                    source_line=prev.source_line + 0.5,
                    interpolated=True,
                ))
            inserted += max(missing, 0)
        result.append(curr)

    _log.info('Interpolation inserted %d points into %d gaps.',
              inserted, len(report.issues))
    return TideSeries(result)

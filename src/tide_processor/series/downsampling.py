"""
Greedy downsampling with a reversible history.

:func:`downsample` thins a series to a target spacing in one forward pass.
The history helpers keep the series that was downsampled so the operation
can be undone; the history is a plain tuple used as a stack.
"""
from __future__ import annotations

import logging

import pandas as pd

from .intervals import TOLERANCE_MS
from .observations import TideSeries

logger = logging.getLogger(__name__)

History = tuple[TideSeries, ...]


def downsample(
    series: TideSeries,
    target_interval_ms: float,
    logger: logging.Logger | None = None,
) -> TideSeries:
    """
    Keep observations spaced at least *target_interval_ms* apart.

    The first observation is always kept; each later one is kept when it is
    at least ``target_interval_ms - 1000`` ms after the last kept one.

    Parameters
    ----------
    series : TideSeries
        Input series.
    target_interval_ms : float
        Target spacing in milliseconds.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    TideSeries
        The thinned series (the input itself when it is empty).
    """
    _log = logger or logging.getLogger(__name__)
    if len(series) == 0:
        return series

    threshold = pd.Timedelta(milliseconds=target_interval_ms - TOLERANCE_MS)
    kept = [series[0]]
    last_time = series[0].timestamp
    for obs in series[1:]:
        if obs.timestamp - last_time >= threshold:
            kept.append(obs)
            last_time = obs.timestamp

    _log.info(
        'Downsampled %d -> %d observations (target %.0f s).',
        len(series), len(kept), target_interval_ms / 1000.0,
    )
    return TideSeries(kept)


def downsample_with_history(
    series: TideSeries,
    history: History,
    target_interval_ms: float,
    logger: logging.Logger | None = None,
) -> tuple[TideSeries, History]:
    """Downsample and push the previous series onto *history*."""
    if len(series) == 0:
        return series, history
    return (
        downsample(series, target_interval_ms, logger=logger),
        history + (series,),
    )


def undo(series: TideSeries, history: History) -> tuple[TideSeries, History]:
    """Restore the most recent snapshot; no-op when *history* is empty."""
    if not history:
        return series, history
    return history[-1], history[:-1]

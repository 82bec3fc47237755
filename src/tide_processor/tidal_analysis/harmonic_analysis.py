"""
Harmonic analysis of a tide series window.

Three demodulation estimators of increasing rigour share one kernel: the
window is demeaned (the mean is reported as mean sea level and chart datum
``Z0``) and, for every constituent, correlated with the cosine and sine of
its astronomical argument::

    a = 2/n * sum(d * cos(arg))      b = 2/n * sum(d * sin(arg))
    H = sqrt(a**2 + b**2)            g = atan2(b, a)

so that ``d ~ H cos(arg - g)``.

``simplified``
    Eight principal constituents, ``arg = w * t``.
``admiralty``
    The same eight with equilibrium arguments ``V0`` and closed-form nodal
    corrections ``f``, ``u``; ``arg = w * t + V0 + u``.
``ttide``
    All constituents of the 146-entry table that pass the Rayleigh
    criterion, with Doodson-number astronomical arguments ``v``;
    ``arg = w * t + 2*pi*(v + u)``.

A fourth method, ``utide``, hands the window to :func:`utide.solve`
(iteratively reweighted least squares with full nodal corrections) and is
useful as a reference for the demodulation estimators.

References
----------
- Pawlowicz, R., Beardsley, B. and Lentz, S. (2002). Classical tidal
  harmonic analysis including error estimates in MATLAB using T_TIDE.
  Computers & Geosciences 28, 929-937.
- Codiga, D.L. (2011). Unified Tidal Analysis and Prediction Using the
  UTide Matlab Functions.  Technical Report 2011-01, URI-GSO.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import numpy as np
import pandas as pd
from utide import solve

from ..series.date_formats import format_display
from ..series.observations import TideSeries
from .astronomy import (
    admiralty_equilibrium_arguments,
    astronomical_arguments,
    j2000_mean_longitudes,
    julian_date,
)
from .constituent_database import CONSTITUENT_DATABASE
from .constituents import (
    CONSTITUENT_DESCRIPTIONS,
    NOS_37_CONSTITUENTS,
    PRINCIPAL_CONSTITUENTS,
    PRINCIPAL_SPEEDS,
)
from .nodal_corrections import admiralty_nodal_corrections, doodson_nodal_correction
from .selection import ConstituentSelection, select_constituents

logger = logging.getLogger(__name__)

METHOD_LABELS: dict[str, str] = {
    'simplified': 'Simplified Least-Squares',
    'admiralty': 'Admiralty Method (with Nodal Corrections)',
    'ttide': 'T_TIDE Method (Pawlowicz et al. 2002)',
    'utide': 'UTide Reference (Codiga 2011)',
}
"""Analysis methods and their report labels."""

DEFAULT_TTIDE_DT_HOURS = 1.0 / 6.0
"""Sampling step assumed when it cannot be measured (single sample)."""

TIME_BASES = ('index', 'timestamps')


class AnalysisCancelled(Exception):
    """Raised when an analysis is cancelled before it completes."""


# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConstituentEstimate:
    amplitude: float
    phase: float
    description: str = ''
    frequency: float | None = None
    speed: float | None = None
    f: float | None = None
    u: float | None = None
    snr: float | None = None


@dataclass(frozen=True)
class TimeSpan:
    start: pd.Timestamp
    end: pd.Timestamp
    days: float

    @property
    def start_formatted(self) -> str:
        return format_display(self.start)

    @property
    def end_formatted(self) -> str:
        return format_display(self.end)


@dataclass(frozen=True)
class HarmonicAnalysisResult:
    """
    Outcome of one analysis run.

    ``constituents`` is a read-only mapping from constituent name to
    :class:`ConstituentEstimate`, in reporting order.  ``selection`` is set
    by the T_TIDE method, ``astronomical`` by the Admiralty and T_TIDE
    methods.
    """

    method: str
    label: str
    mean_sea_level: float
    chart_datum: float
    constituents: Mapping[str, ConstituentEstimate]
    data_point_count: int
    time_span: TimeSpan
    selection: ConstituentSelection | None = None
    astronomical: Mapping[str, object] | None = None

    def to_frame(self) -> pd.DataFrame:
        """Columns ``Name``, ``Amplitude``, ``Phase``, ``Frequency``, ``f``, ``u``, ``SNR``."""
        names = list(self.constituents)
        estimates = [self.constituents[n] for n in names]
        return pd.DataFrame({
            'Name': names,
            'Amplitude': [e.amplitude for e in estimates],
            'Phase': [e.phase for e in estimates],
            'Frequency': [np.nan if e.frequency is None else e.frequency
                          for e in estimates],
            'f': [np.nan if e.f is None else e.f for e in estimates],
            'u': [np.nan if e.u is None else e.u for e in estimates],
            'SNR': [np.nan if e.snr is None else e.snr for e in estimates],
            'Description': [e.description for e in estimates],
        })


# ---------------------------------------------------------------------------
# Shared kernel
# ---------------------------------------------------------------------------

def _wrap360(angle: float) -> float:
    wrapped = float(angle) % 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def _demodulate(detrended: np.ndarray, arg: np.ndarray) -> tuple[float, float]:
    """Return amplitude ``H`` and phase ``g`` (degrees, [0, 360))."""
    n = len(detrended)
    a = (2.0 / n) * float(np.sum(detrended * np.cos(arg)))
    b = (2.0 / n) * float(np.sum(detrended * np.sin(arg)))
    return float(np.hypot(a, b)), _wrap360(np.degrees(np.arctan2(b, a)))


def _check_cancel(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise AnalysisCancelled('Harmonic analysis cancelled.')


def _prepare_window(series: TideSeries) -> tuple[np.ndarray, np.ndarray, float]:
    """Return (hours from start, demeaned values, mean) for a non-empty window."""
    values = series.values
    if not np.all(np.isfinite(values)):
        raise ValueError('values contains non-finite data.')
    times = series.times
    hours = np.asarray((times - times[0]) / pd.Timedelta(hours=1), dtype=float)
    mean_level = float(np.mean(values))
    return hours, values - mean_level, mean_level


def _time_span(series: TideSeries) -> TimeSpan:
    return TimeSpan(series[0].timestamp, series[-1].timestamp,
                    series.duration_days())


def _result(
    method: str,
    series: TideSeries,
    mean_level: float,
    estimates: dict[str, ConstituentEstimate],
    **extra,
) -> HarmonicAnalysisResult:
    return HarmonicAnalysisResult(
        method=method,
        label=METHOD_LABELS[method],
        mean_sea_level=mean_level,
        chart_datum=mean_level,
        constituents=MappingProxyType(estimates),
        data_point_count=len(series),
        time_span=_time_span(series),
        **extra,
    )


# ---------------------------------------------------------------------------
# Estimators
# ---------------------------------------------------------------------------

def simplified_analysis(
    series: TideSeries,
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
) -> HarmonicAnalysisResult | None:
    """
    Demodulate the eight principal constituents without nodal corrections.

    Time is measured in hours from the first sample of the window and the
    reported phase is the raw phase ``g``.  Returns ``None`` for an empty
    window.
    """
    _log = logger or logging.getLogger(__name__)
    if len(series) == 0:
        _log.info('Simplified analysis skipped: empty window.')
        return None

    hours, detrended, mean_level = _prepare_window(series)
    estimates = {}
    for name in PRINCIPAL_CONSTITUENTS:
        _check_cancel(cancel_event)
        speed = PRINCIPAL_SPEEDS[name]
        amplitude, phase = _demodulate(detrended, np.radians(speed) * hours)
        estimates[name] = ConstituentEstimate(
            amplitude=amplitude,
            phase=phase,
            description=CONSTITUENT_DESCRIPTIONS[name],
            frequency=speed / 360.0,
            speed=speed,
        )

    _log.info('Simplified analysis: %d samples, MSL=%.4f.',
              len(series), mean_level)
    return _result('simplified', series, mean_level, estimates)


def admiralty_analysis(
    series: TideSeries,
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
) -> HarmonicAnalysisResult | None:
    """
    Demodulate the principal constituents with ``V0``, ``f`` and ``u``.

    The equilibrium arguments and nodal corrections are evaluated at the
    first sample of the window.  Amplitudes are divided by ``f`` and the
    phase is reported as ``(g - V0 - u) mod 360``.  Returns ``None`` for an
    empty window.
    """
    _log = logger or logging.getLogger(__name__)
    if len(series) == 0:
        _log.info('Admiralty analysis skipped: empty window.')
        return None

    hours, detrended, mean_level = _prepare_window(series)
    longitudes = j2000_mean_longitudes(series[0].timestamp)
    v0 = admiralty_equilibrium_arguments(longitudes)
    nodal = admiralty_nodal_corrections(longitudes.N)

    estimates = {}
    for name in PRINCIPAL_CONSTITUENTS:
        _check_cancel(cancel_event)
        speed = PRINCIPAL_SPEEDS[name]
        corr = nodal[name]
        arg = np.radians(speed) * hours + np.radians(v0[name] + corr.u)
        amplitude, phase = _demodulate(detrended, arg)
        estimates[name] = ConstituentEstimate(
            amplitude=amplitude / corr.f,
            phase=_wrap360(phase - v0[name] - corr.u),
            description=CONSTITUENT_DESCRIPTIONS[name],
            frequency=speed / 360.0,
            speed=speed,
            f=corr.f,
            u=corr.u,
        )

    _log.info('Admiralty analysis: %d samples, T=%.6f, N=%.2f deg.',
              len(series), longitudes.T, longitudes.N % 360.0)
    return _result(
        'admiralty', series, mean_level, estimates,
        astronomical=MappingProxyType({
            'T': longitudes.T,
            'reference_epoch': 'J2000.0 (Jan 1, 2000)',
            'N': longitudes.N,
        }),
    )


def _sampling_interval_hours(series: TideSeries) -> float:
    """Median step of the window in hours (fallback for a single sample)."""
    if len(series) < 2:
        return DEFAULT_TTIDE_DT_HOURS
    times = series.times
    steps = np.asarray((times[1:] - times[:-1]) / pd.Timedelta(hours=1),
                       dtype=float)
    dt = float(np.median(steps))
    return dt if dt > 0 else DEFAULT_TTIDE_DT_HOURS


def ttide_analysis(
    series: TideSeries,
    rayleigh: float = 1.0,
    sample_interval_hours: float | None = None,
    time_basis: str = 'index',
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
) -> HarmonicAnalysisResult | None:
    """
    T_TIDE-style analysis over the Rayleigh-selected constituent table.

    Parameters
    ----------
    series : TideSeries
        Analysis window.
    rayleigh : float, optional
        Rayleigh criterion factor (default 1.0).
    sample_interval_hours : float, optional
        Sampling step ``dt``.  Defaults to the median step of the window.
    time_basis : {"index", "timestamps"}, optional
        ``"index"`` (default) times sample *i* at ``i * dt``, i.e. assumes
        uniform sampling.  ``"timestamps"`` uses the hours elapsed since
        the first sample instead, which is correct for gapped windows.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.
    cancel_event : threading.Event, optional
        When set, the analysis stops with :class:`AnalysisCancelled`.

    Returns
    -------
    HarmonicAnalysisResult or None
        ``None`` for an empty window.  Astronomical arguments are evaluated
        at the mid-time of the window; phases are Greenwich phases
        ``(g - 360 v - 360 u) mod 360``.  ``snr`` is reported as 0 for
        every constituent; no error estimate is made.

    Raises
    ------
    ValueError
        If *time_basis* is unknown or *sample_interval_hours* is not
        positive.
    """
    _log = logger or logging.getLogger(__name__)
    if time_basis not in TIME_BASES:
        raise ValueError(
            f"time_basis must be one of {TIME_BASES}, got '{time_basis}'."
        )
    if len(series) == 0:
        _log.info('T_TIDE analysis skipped: empty window.')
        return None

    dt = (sample_interval_hours if sample_interval_hours is not None
          else _sampling_interval_hours(series))
    nobs = len(series)
    selection = select_constituents(dt, nobs, rayleigh=rayleigh, logger=_log)

    hours, detrended, mean_level = _prepare_window(series)
    t = np.arange(nobs) * dt if time_basis == 'index' else hours

    start, end = series[0].timestamp, series[-1].timestamp
    jd = julian_date(start + (end - start) / 2)
    astro = astronomical_arguments(jd)

    estimates = {}
    for name in selection.selected:
        _check_cancel(cancel_event)
        constituent = CONSTITUENT_DATABASE[name]
        corr = doodson_nodal_correction(astro, constituent.doodson)
        arg = 2.0 * np.pi * (constituent.frequency * t + corr.v + corr.u)
        amplitude, phase = _demodulate(detrended, arg)
        estimates[name] = ConstituentEstimate(
            amplitude=amplitude / corr.f,
            phase=_wrap360(phase - 360.0 * corr.v - 360.0 * corr.u),
            description=name,
            frequency=constituent.frequency,
            speed=constituent.speed,
            f=corr.f,
            u=corr.u * 360.0,
            snr=0.0,
        )

    _log.info(
        'T_TIDE analysis: %d samples, dt=%.4f h, %d of %d constituents.',
        nobs, dt, len(estimates), selection.total_count,
    )
    return _result(
        'ttide', series, mean_level, estimates,
        selection=selection,
        astronomical=MappingProxyType({
            'julian_date': jd,
            'arguments': astro,
            'sample_interval_hours': dt,
            'time_basis': time_basis,
        }),
    )


def utide_analysis(
    series: TideSeries,
    latitude: float | None = None,
    constit: list[str] | None = None,
    rayleigh_min: float = 0.9,
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
) -> HarmonicAnalysisResult | None:
    """
    Reference analysis with :func:`utide.solve`.

    Parameters
    ----------
    series : TideSeries
        Analysis window.
    latitude : float
        Station latitude in decimal degrees (needed for nodal corrections).
    constit : list of str, optional
        Constituents to request.  Defaults to the NOS standard 37 names
        present in the constituent table; UTide drops any that the record
        cannot resolve.
    rayleigh_min : float, optional
        UTide's Rayleigh separation criterion (default 0.9).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.
    cancel_event : threading.Event, optional
        Checked before the solver starts; the solver itself is not
        interruptible.

    Raises
    ------
    ValueError
        If *latitude* is missing.
    """
    _log = logger or logging.getLogger(__name__)
    if latitude is None:
        raise ValueError('latitude is required for the utide method.')
    if len(series) == 0:
        _log.info('UTide analysis skipped: empty window.')
        return None
    if constit is None:
        constit = [c for c in NOS_37_CONSTITUENTS if c in CONSTITUENT_DATABASE]

    _, _, mean_level = _prepare_window(series)
    _check_cancel(cancel_event)
    _log.info('Running UTide on %d samples, %d constituents requested.',
              len(series), len(constit))
    coef = solve(
        t=series.times,
        u=series.values,
        lat=latitude,
        constit=constit,
        method='ols',
        conf_int='linear',
        Rayleigh_min=rayleigh_min,
        verbose=False,
    )

    frequencies = getattr(getattr(coef, 'aux', None), 'frq', None)
    estimates = {}
    for i, name in enumerate(coef.name):
        name = str(name).strip()
        estimates[name] = ConstituentEstimate(
            amplitude=float(coef.A[i]),
            phase=_wrap360(coef.g[i]),
            description=name,
            frequency=None if frequencies is None else float(frequencies[i]),
        )

    solved_mean = float(coef.mean) if hasattr(coef, 'mean') else mean_level
    _log.info('UTide analysis complete. Mean=%.4f, %d constituents resolved.',
              solved_mean, len(estimates))
    return _result('utide', series, solved_mean, estimates)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def harmonic_analysis(
    series: TideSeries,
    method: str = 'simplified',
    logger: logging.Logger | None = None,
    cancel_event: threading.Event | None = None,
    **options,
) -> HarmonicAnalysisResult | None:
    """
    Run one of the analysis methods on a window.

    Parameters
    ----------
    series : TideSeries
        Analysis window (typically ``series.window(lo, hi)``).
    method : str, optional
        ``"simplified"`` (default), ``"admiralty"``, ``"ttide"`` or
        ``"utide"``.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.
    cancel_event : threading.Event, optional
        Cooperative cancellation flag.
    **options
        Method-specific keyword arguments (``rayleigh``,
        ``sample_interval_hours``, ``time_basis`` for T_TIDE; ``latitude``,
        ``constit``, ``rayleigh_min`` for UTide).

    Returns
    -------
    HarmonicAnalysisResult or None
        ``None`` when the window is empty.

    Raises
    ------
    ValueError
        If *method* is unknown.
    """
    method = method.strip().lower()
    if method == 'simplified':
        return simplified_analysis(series, logger=logger,
                                   cancel_event=cancel_event, **options)
    if method == 'admiralty':
        return admiralty_analysis(series, logger=logger,
                                  cancel_event=cancel_event, **options)
    if method == 'ttide':
        return ttide_analysis(series, logger=logger,
                              cancel_event=cancel_event, **options)
    if method == 'utide':
        return utide_analysis(series, logger=logger,
                              cancel_event=cancel_event, **options)
    raise ValueError(
        f"Unknown analysis method '{method}'. Expected one of: "
        f"{', '.join(METHOD_LABELS)}."
    )

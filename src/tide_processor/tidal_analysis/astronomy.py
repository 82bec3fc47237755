"""
Astronomical arguments for nodal corrections and equilibrium phases.

Two parameterizations are provided:

* :func:`astronomical_arguments` -- the t_tide ``t_astron`` polynomials
  referenced to JD 2415020.0 (1899-12-31 12:00 UT), returned in cycles and
  consumed by the Doodson-number nodal correction of the T_TIDE method.
* :func:`j2000_mean_longitudes` -- linear mean longitudes in degrees from
  Julian centuries since 2000-01-01 00:00 UT, used for the Admiralty
  equilibrium arguments ``V0`` and the lunar node ``N``.

Naive timestamps are interpreted as UT.
"""
from __future__ import annotations

from typing import NamedTuple

import numpy as np
import pandas as pd

T_ASTRON_EPOCH_JD = 2415020.0
"""Reference epoch of the t_tide polynomials (1899-12-31 12:00 UT)."""

J2000_REFERENCE = pd.Timestamp('2000-01-01 00:00:00')
"""Reference instant of the Admiralty mean longitudes."""


class AstronomicalArguments(NamedTuple):
    """Lunar time and five orbital angles, each as a fraction of a turn."""

    tau: float
    s: float
    h: float
    p: float
    n_prime: float
    p_prime: float

    def as_array(self) -> np.ndarray:
        return np.array(self, dtype=float)


class MeanLongitudes(NamedTuple):
    """Mean longitudes (degrees) at Julian century ``T`` after J2000."""

    T: float
    s: float
    h: float
    p: float
    N: float
    p1: float


def _as_utc_naive(ts: pd.Timestamp) -> pd.Timestamp:
    ts = pd.Timestamp(ts)
    if ts.tzinfo is not None:
        ts = ts.tz_convert('UTC').tz_localize(None)
    return ts


def julian_date(ts: pd.Timestamp) -> float:
    """Julian Date of *ts* (UT)."""
    return float(_as_utc_naive(ts).to_julian_date())


def astronomical_arguments(jd: float) -> AstronomicalArguments:
    """
    Compute ``tau, s, h, p, N', p'`` at Julian Date *jd*.

    Each angle is evaluated in degrees, reduced modulo 360 and divided by
    360, so the result is in cycles.  Lunar time is
    ``tau = frac(jd) + h - s``.

    Parameters
    ----------
    jd : float
        Julian Date.

    Returns
    -------
    AstronomicalArguments
    """
    d = jd - T_ASTRON_EPOCH_JD
    D = d / 10000.0

    def _cycles(degrees: float) -> float:
        return (degrees % 360.0) / 360.0

    s = _cycles(270.434164 + 13.1763965268 * d
                - 0.0000850 * D**2 + 0.000000039 * D**3)
    h = _cycles(279.696678 + 0.9856473354 * d + 0.00002267 * D**2)
    p = _cycles(334.329556 + 0.1114040803 * d
                - 0.0007739 * D**2 - 0.00000026 * D**3)
    n_prime = _cycles(-259.183275 + 0.0529539222 * d
                      - 0.0001557 * D**2 - 0.000000050 * D**3)
    p_prime = _cycles(281.220844 + 0.0000470684 * d
                      + 0.0000339 * D**2 + 0.000000070 * D**3)
    tau = (jd % 1.0) + h - s

    return AstronomicalArguments(tau, s, h, p, n_prime, p_prime)


def j2000_mean_longitudes(ts: pd.Timestamp) -> MeanLongitudes:
    """Mean lunar/solar longitudes (degrees, unreduced) at *ts*."""
    days = (_as_utc_naive(ts) - J2000_REFERENCE) / pd.Timedelta(days=1)
    T = days / 36525.0
    return MeanLongitudes(
        T=T,
        s=218.3164 + 481267.8813 * T,
        h=280.4661 + 36000.7698 * T,
        p=83.3535 + 4069.0137 * T,
        N=125.0445 - 1934.1363 * T,
        p1=282.9400 + 1.7192 * T,
    )


def admiralty_equilibrium_arguments(lon: MeanLongitudes) -> dict[str, float]:
    """Equilibrium arguments ``V0`` (degrees) of the principal constituents."""
    s, h, p = lon.s, lon.h, lon.p
    return {
        'M2': 2.0 * (h - s),
        'S2': 0.0,
        'N2': 2.0 * (h - s) - p,
        'K2': 2.0 * h,
        'K1': h + 90.0,
        'O1': h - 2.0 * s + 90.0,
        'P1': h - 90.0,
        'Q1': h - 2.0 * s - p + 90.0,
    }

"""
Nodal corrections for the 18.6-year lunar nodal cycle.

Two forms are used by the estimators:

* :func:`admiralty_nodal_corrections` -- closed-form amplitude factor ``f``
  and phase correction ``u`` (degrees) from the longitude of the lunar
  ascending node ``N``.
* :func:`doodson_nodal_correction` -- the T_TIDE form, where the
  astronomical argument ``v`` (cycles) is the Doodson-number weighted sum of
  the astronomical arguments.  ``f`` and ``u`` are not modelled in this form
  and stay at 1 and 0.
"""
from __future__ import annotations

from typing import NamedTuple, Sequence

import numpy as np

from .astronomy import AstronomicalArguments


class NodalCorrection(NamedTuple):
    f: float
    u: float
    v: float


IDENTITY = NodalCorrection(f=1.0, u=0.0, v=0.0)

# (f coefficient on cos N, u coefficient on sin N [deg]) per constituent
_ADMIRALTY_COEFFICIENTS: dict[str, tuple[float, float]] = {
    'M2': (-0.037, -2.1),
    'S2': (0.0, 0.0),
    'N2': (-0.037, -2.1),
    'K2': (0.286, -17.7),
    'K1': (0.115, -8.9),
    'O1': (0.189, 10.8),
    'P1': (0.0, 0.0),
    'Q1': (0.188, 10.8),
}


def admiralty_nodal_corrections(node_longitude: float) -> dict[str, NodalCorrection]:
    """
    Closed-form ``f`` and ``u`` for the eight principal constituents.

    Parameters
    ----------
    node_longitude : float
        Longitude of the Moon's ascending node ``N`` in degrees.

    Returns
    -------
    dict
        ``{name: NodalCorrection(f, u_degrees, v=0.0)}``.
    """
    n_rad = np.radians(node_longitude)
    return {
        name: NodalCorrection(
            f=1.0 + f_coef * float(np.cos(n_rad)),
            u=u_coef * float(np.sin(n_rad)),
            v=0.0,
        )
        for name, (f_coef, u_coef) in _ADMIRALTY_COEFFICIENTS.items()
    }


def doodson_nodal_correction(
    astro: AstronomicalArguments | Sequence[float],
    doodson: Sequence[int] | None,
) -> NodalCorrection:
    """
    T_TIDE-style correction ``v = sum(doodson * astro) mod 1``.

    Constituents without Doodson numbers get the identity correction.
    """
    if doodson is None:
        return IDENTITY
    v = float(np.dot(np.asarray(doodson, dtype=float),
                     np.asarray(astro, dtype=float))) % 1.0
    return NodalCorrection(f=1.0, u=0.0, v=v)


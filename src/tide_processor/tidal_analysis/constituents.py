"""
Principal tidal constituents used by the Simplified and Admiralty methods.

The eight astronomical constituents below dominate the tide at most
stations.  Speeds are from Schureman (1958) Special Publication No. 98.
The NOS standard 37 list is the default request for the UTide reference
method.
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Eight principal constituents in reporting order.
# ---------------------------------------------------------------------------

PRINCIPAL_CONSTITUENTS: list[str] = [
    'M2', 'S2', 'N2', 'K2', 'K1', 'O1', 'P1', 'Q1',
]
"""Constituents analysed by the Simplified and Admiralty methods."""

PRINCIPAL_SPEEDS: dict[str, float] = {
    # Semidiurnal
    'M2': 28.9841042,
    'S2': 30.0000000,
    'N2': 28.4397295,
    'K2': 30.0821373,
    # Diurnal
    'K1': 15.0410686,
    'O1': 13.9430356,
    'P1': 14.9589314,
    'Q1': 13.3986609,
}
"""Angular speeds (degrees/hour) of the principal constituents."""

CONSTITUENT_DESCRIPTIONS: dict[str, str] = {
    'M2': 'Principal lunar semidiurnal',
    'S2': 'Principal solar semidiurnal',
    'N2': 'Larger lunar elliptic semidiurnal',
    'K2': 'Lunisolar semidiurnal',
    'K1': 'Lunisolar diurnal',
    'O1': 'Lunar diurnal',
    'P1': 'Solar diurnal',
    'Q1': 'Larger lunar elliptic diurnal',
}

# ---------------------------------------------------------------------------
# NOS standard 37, ordered as Appendix C of NOS CS 24 (Zhang et al. 2006).
# ---------------------------------------------------------------------------

NOS_37_CONSTITUENTS: list[str] = [
    # Semidiurnal
    'M2', 'S2', 'N2', 'K2', '2N2', 'MU2', 'NU2', 'L2', 'T2', 'R2', 'LDA2',
    # Diurnal
    'K1', 'O1', 'P1', 'Q1', 'J1', 'M1', 'OO1', '2Q1', 'RHO1',
    # Long-period
    'MF', 'MM', 'SSA', 'SA', 'MSM', 'MSF',
    # Shallow-water / overtides
    'M4', 'M6', 'M8', 'MS4', 'MN4', 'MK3', 'S4', 'S6', '2MK3', '2SM2', 'MO3',
]
"""Default constituent request for the UTide reference method."""

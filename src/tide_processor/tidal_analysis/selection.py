"""
Constituent selection by the Rayleigh criterion.

Two constituents can only be separated when their frequencies differ by at
least ``rayleigh / record_length``.  Each database entry names the
neighbouring constituent it must be resolved from; entries too close to
their comparison constituent for the record at hand are dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from .constituent_database import (
    CONSTITUENT_DATABASE,
    MEAN_LEVEL,
    TidalConstituent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConstituentSelection:
    selected: tuple[str, ...]
    excluded: tuple[str, ...]
    min_resolution: float
    rayleigh: float

    @property
    def total_count(self) -> int:
        """Number of candidate constituents (the mean level not counted)."""
        return len(self.selected) + len(self.excluded)


def rayleigh_resolution(
    sampling_interval_hours: float,
    observation_count: int,
    rayleigh: float = 1.0,
) -> float:
    """Minimum resolvable frequency separation in cycles/hour."""
    if sampling_interval_hours <= 0:
        raise ValueError('sampling_interval_hours must be positive.')
    if observation_count <= 0:
        raise ValueError('observation_count must be positive.')
    return rayleigh / (sampling_interval_hours * observation_count)


def select_constituents(
    sampling_interval_hours: float,
    observation_count: int,
    rayleigh: float = 1.0,
    database: Mapping[str, TidalConstituent] = CONSTITUENT_DATABASE,
    logger: logging.Logger | None = None,
) -> ConstituentSelection:
    """
    Choose the constituents resolvable from a record.

    A constituent is kept when it has no comparison constituent, when its
    comparison is the mean level ``Z0``, when its comparison constituent
    is not in *database*, or when the two frequencies differ by at least
    the Rayleigh resolution.  The mean level ``Z0`` is never selected.

    Parameters
    ----------
    sampling_interval_hours : float
        Sampling interval of the record in hours.
    observation_count : int
        Number of samples in the record.
    rayleigh : float, optional
        Rayleigh criterion factor (default 1.0).
    database : mapping, optional
        Candidate constituents (default: the full 146-entry table).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    ConstituentSelection
        Selected and excluded names in database order, plus the resolution.

    Raises
    ------
    ValueError
        If the interval or the count is not positive.
    """
    _log = logger or logging.getLogger(__name__)
    minres = rayleigh_resolution(
        sampling_interval_hours, observation_count, rayleigh,
    )

    selected = []
    excluded = []
    for name, constituent in database.items():
        if name == MEAN_LEVEL:
            continue
        comparison = constituent.comparison
        # Z0 is the mean level, not a neighbouring line
        if comparison == MEAN_LEVEL:
            comparison = None
        reference = database.get(comparison) if comparison else None
        if reference is None or abs(constituent.frequency - reference.frequency) >= minres:
            selected.append(name)
        else:
            excluded.append(name)

    _log.info(
        'Rayleigh selection: %d of %d constituents resolvable '
        '(min resolution %.8f cph).',
        len(selected), len(selected) + len(excluded), minres,
    )
    return ConstituentSelection(tuple(selected), tuple(excluded), minres, rayleigh)

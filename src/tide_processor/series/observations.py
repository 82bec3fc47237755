"""
Observation and series containers for the normalization pipeline.

A :class:`TideSeries` is an immutable, time-ordered run of
:class:`Observation` records.  Every pipeline stage (interpolation,
downsampling, windowing) builds a new series instead of editing one in
place, so snapshots kept for undo stay valid.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .date_formats import format_display


@dataclass(frozen=True)
class Observation:
    """A single sea-level reading."""

    timestamp: pd.Timestamp
    value: float
    source_line: float
    interpolated: bool = False

    @property
    def formatted(self) -> str:
        return format_display(self.timestamp)


class TideSeries:
    """
    Immutable sequence of observations sorted by timestamp.

    Ties are allowed; an out-of-order sequence raises :class:`ValueError`.
    Equality is by value, so a series restored from history compares equal
    to the one that was saved.
    """

    __slots__ = ('_observations',)

    def __init__(self, observations: Iterable[Observation] = ()):
        obs = tuple(observations)
        for prev, curr in zip(obs, obs[1:]):
            if curr.timestamp < prev.timestamp:
                raise ValueError(
                    f"Observations must be sorted by time: {curr.formatted} "
                    f"(line {curr.source_line}) follows {prev.formatted} "
                    f"(line {prev.source_line})."
                )
        self._observations = obs

    @classmethod
    def from_arrays(
        cls,
        time: pd.DatetimeIndex | Iterable,
        values: Iterable[float],
    ) -> TideSeries:
        """Build a series from parallel time/value arrays (line = position)."""
        time = pd.DatetimeIndex(time)
        values = np.asarray(values, dtype=float)
        if len(time) != len(values):
            raise ValueError(
                f"time ({len(time)}) and values ({len(values)}) must have the "
                f"same length."
            )
        return cls(
            Observation(ts, float(v), float(i + 1))
            for i, (ts, v) in enumerate(zip(time, values))
        )

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._observations)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self._observations)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return TideSeries(self._observations[index])
        return self._observations[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, TideSeries):
            return NotImplemented
        return self._observations == other._observations

    def __hash__(self) -> int:
        return hash(self._observations)

    def __repr__(self) -> str:
        if not self._observations:
            return 'TideSeries([])'
        return (
            f'TideSeries(n={len(self)}, start={self[0].formatted!r}, '
            f'end={self[-1].formatted!r})'
        )

    # ------------------------------------------------------------------
    # Array views
    # ------------------------------------------------------------------
    @property
    def times(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex([o.timestamp for o in self._observations])

    @property
    def values(self) -> np.ndarray:
        return np.array([o.value for o in self._observations], dtype=float)

    @property
    def interpolated_mask(self) -> np.ndarray:
        return np.array(
            [o.interpolated for o in self._observations], dtype=bool,
        )

    def to_frame(self) -> pd.DataFrame:
        """Columns ``DateTime``, ``Value``, ``SourceLine``, ``Interpolated``."""
        return pd.DataFrame({
            'DateTime': self.times,
            'Value': self.values,
            'SourceLine': [o.source_line for o in self._observations],
            'Interpolated': self.interpolated_mask,
        })

    def duration_days(self) -> float:
        if len(self) < 2:
            return 0.0
        return (self[-1].timestamp - self[0].timestamp) / pd.Timedelta(days=1)

    # ------------------------------------------------------------------
    # Windowing
    # ------------------------------------------------------------------
    def window_bounds(self, start_pct: float, end_pct: float) -> tuple[int, int]:
        """Index bounds ``[start, end)`` for a percentage range of the series."""
        n = len(self)
        # rounding absorbs float noise from percentages derived from indices
        start = math.floor(round(start_pct / 100.0 * n, 9))
        end = math.ceil(round(end_pct / 100.0 * n, 9))
        return max(0, min(start, n)), max(0, min(end, n))

    def window(self, start_pct: float = 0.0, end_pct: float = 100.0) -> TideSeries:
        """Return the observations inside a percentage range of the series."""
        start, end = self.window_bounds(start_pct, end_pct)
        return self[start:end]

    def chart_view(self) -> pd.DataFrame:
        """Projection used by plotting front ends: ``time``, ``tide``, ``interpolated``."""
        return pd.DataFrame({
            'time': [o.formatted for o in self._observations],
            'tide': self.values,
            'interpolated': self.interpolated_mask,
        })


def interpolated_indices(series: TideSeries) -> list[int]:
    """Positions of all synthesized observations in *series*."""
    return [i for i, obs in enumerate(series) if obs.interpolated]


def neighbourhood(
    series: TideSeries,
    index: int,
    half_width: pd.Timedelta = pd.Timedelta(hours=2),
) -> TideSeries:
    """Observations within *half_width* either side of ``series[index]``."""
    centre = series[index].timestamp
    return TideSeries(
        obs for obs in series
        if centre - half_width <= obs.timestamp <= centre + half_width
    )

"""
Series builder: raw multi-line tide records to a sorted :class:`TideSeries`.

Each non-blank line holds the date/time tokens followed by the reading::

    2025/08/22 06:40 -0.260359

Lines that cannot be parsed are skipped and reported; one bad record never
aborts the batch.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from .date_formats import DateFormat, get_date_format, parse_timestamp
from .observations import Observation, TideSeries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseWarning:
    """A skipped input line."""

    line_number: int
    line: str
    reason: str


@dataclass(frozen=True)
class ParseResult:
    series: TideSeries
    warnings: tuple[ParseWarning, ...] = field(default_factory=tuple)

    @property
    def skipped(self) -> int:
        return len(self.warnings)


def parse_line(
    line: str,
    line_number: int,
    fmt: str | DateFormat,
) -> Observation:
    """
    Parse one record into an :class:`Observation`.

    Raises
    ------
    ValueError
        If the line has fewer than three fields, the date tokens do not
        match *fmt*, or the value is not a finite number.
    """
    parts = line.split()
    if len(parts) < 3:
        raise ValueError(
            f"expected at least 3 fields (date, time, value), got {len(parts)}"
        )
    timestamp = parse_timestamp(' '.join(parts[:-1]), fmt)
    value = float(parts[-1])
    if not math.isfinite(value):
        raise ValueError(f"value '{parts[-1]}' is not finite")
    return Observation(timestamp, value, float(line_number))


def parse_series(
    text: str,
    fmt: str | DateFormat,
    logger: logging.Logger | None = None,
) -> ParseResult:
    """
    Split raw text into observations and sort them by time.

    Parameters
    ----------
    text : str
        Newline-separated records.
    fmt : str or DateFormat
        Date format of the leading tokens (see
        :data:`~tide_processor.series.date_formats.DATE_FORMATS`).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    ParseResult
        The sorted series and one :class:`ParseWarning` per skipped line.
        Line numbers count non-blank lines from 1.

    Raises
    ------
    ValueError
        If *fmt* is not a supported format.
    """
    _log = logger or logging.getLogger(__name__)
    date_format = get_date_format(fmt)

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    observations = []
    warnings = []
    for line_number, line in enumerate(lines, start=1):
        try:
            observations.append(parse_line(line, line_number, date_format))
        except ValueError as exc:
            _log.warning('Skipping line %d (%r): %s', line_number, line, exc)
            warnings.append(ParseWarning(line_number, line, str(exc)))

    # list.sort is stable, so equal timestamps keep input order
    observations.sort(key=lambda obs: obs.timestamp)

    _log.info(
        'Parsed %d observations from %d lines (%d skipped, format %s).',
        len(observations), len(lines), len(warnings), date_format.pattern,
    )
    return ParseResult(TideSeries(observations), tuple(warnings))

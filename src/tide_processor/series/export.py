"""
Plain-text export of a processed series.

One line per observation, tab separated::

    22/08/2025 07:00:00	-0.355	(interpolated)

The trailing marker is only written for synthesized points.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .date_formats import format_for_export
from .observations import TideSeries

logger = logging.getLogger(__name__)

INTERPOLATED_MARKER = '(interpolated)'


def format_value(value: float) -> str:
    """Shortest text for *value*; integral readings drop the ``.0``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def export_text(series: TideSeries, date_pattern: str) -> str:
    """Render *series* as tab-separated text using *date_pattern* for dates."""
    lines = []
    for obs in series:
        line = f'{format_for_export(obs.timestamp, date_pattern)}\t{format_value(obs.value)}'
        if obs.interpolated:
            line += f'\t{INTERPOLATED_MARKER}'
        lines.append(line)
    return '\n'.join(lines)


def write_export(
    series: TideSeries,
    output_path: str,
    date_pattern: str,
    logger: logging.Logger | None = None,
) -> None:
    """Write :func:`export_text` output to *output_path*."""
    _log = logger or logging.getLogger(__name__)

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_text(series, date_pattern), encoding='utf-8')

    _log.info('Exported %d observations to %s.', len(series), path)

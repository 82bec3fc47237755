"""
Tide Series Subpackage

Provides functionality for:
- Parsing timestamps in the twelve supported date formats
- Building a sorted series from raw text, skipping malformed lines
- Validating the sampling interval and filling gaps by interpolation
- Downsampling with an undo history
- Exporting a series as tab-separated text
- Holding all of the above in an immutable session
  (:mod:`tide_processor.series.session`, which also drives the analysis)
"""

from tide_processor.series.date_formats import (
    DATE_FORMATS,
    DISPLAY_FORMAT,
    format_for_export,
    format_timestamp,
    parse_timestamp,
)
from tide_processor.series.downsampling import (
    downsample,
    downsample_with_history,
    undo,
)
from tide_processor.series.export import export_text, write_export
from tide_processor.series.intervals import (
    IntervalIssue,
    IntervalReport,
    check_interval,
    interpolate_gaps,
    interval_to_ms,
)
from tide_processor.series.observations import Observation, TideSeries
from tide_processor.series.parsing import ParseResult, ParseWarning, parse_series

__all__ = [
    # Data types
    'Observation',
    'TideSeries',
    # Date formats
    'DATE_FORMATS',
    'DISPLAY_FORMAT',
    'parse_timestamp',
    'format_timestamp',
    'format_for_export',
    # Series builder
    'parse_series',
    'ParseResult',
    'ParseWarning',
    # Interval validation and interpolation
    'interval_to_ms',
    'check_interval',
    'interpolate_gaps',
    'IntervalIssue',
    'IntervalReport',
    # Downsampling
    'downsample',
    'downsample_with_history',
    'undo',
    # Export
    'export_text',
    'write_export',
]

"""
Date/time token parsing and formatting for raw tide records.

Tide gauge exports put the timestamp in front of the reading using one of a
small set of layouts.  Rather than branching per layout, every supported
format is described by one row of :data:`DATE_FORMATS` and interpreted by a
single parser and formatter::

    yyyy/mm/dd hh:mm      2025/08/22 06:40
    dd/mm/yy hh:mm:ss     22/08/25 06:40:00

Two-digit years are read as ``2000 + yy``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

import pandas as pd

_TOKEN_SPLIT = re.compile(r'[\s/:]+')
_EXPORT_TOKENS = re.compile(r'yyyy|yy|mm|dd|hh|ss')

_FIELD_ORDERS = {
    'ymd': ('year', 'month', 'day'),
    'mdy': ('month', 'day', 'year'),
    'dmy': ('day', 'month', 'year'),
}


@dataclass(frozen=True)
class DateFormat:
    """Declarative description of one supported timestamp layout."""

    pattern: str
    field_order: str
    year_digits: int
    has_seconds: bool

    @property
    def fields(self) -> tuple[str, str, str]:
        return _FIELD_ORDERS[self.field_order]


def _build_formats() -> dict[str, DateFormat]:
    year_tokens = {4: 'yyyy', 2: 'yy'}
    date_layouts = {
        'ymd': '{y}/mm/dd',
        'mdy': 'mm/dd/{y}',
        'dmy': 'dd/mm/{y}',
    }
    formats = {}
    for digits in (4, 2):
        for order, layout in date_layouts.items():
            for seconds in (False, True):
                pattern = layout.format(y=year_tokens[digits]) + ' hh:mm'
                if seconds:
                    pattern += ':ss'
                formats[pattern] = DateFormat(pattern, order, digits, seconds)
    return formats


DATE_FORMATS: dict[str, DateFormat] = _build_formats()
"""The 12 supported input formats keyed by their pattern string."""

DISPLAY_FORMAT = 'dd/mm/yyyy hh:mm:ss'
"""Format used in diagnostics and for manual date-range entry."""


def get_date_format(fmt: str | DateFormat) -> DateFormat:
    """Resolve a pattern string to its :class:`DateFormat` row."""
    if isinstance(fmt, DateFormat):
        return fmt
    try:
        return DATE_FORMATS[fmt.strip()]
    except KeyError:
        raise ValueError(
            f"Unsupported date format '{fmt}'. Expected one of: "
            f"{', '.join(DATE_FORMATS)}."
        ) from None


def parse_timestamp(text: str, fmt: str | DateFormat) -> pd.Timestamp:
    """
    Parse a date/time token string according to *fmt*.

    The string is split on whitespace, ``/`` and ``:``.  Counting from the
    end: seconds (when the format has them), minutes, hours; the three
    leading tokens are year, month and day in the format's field order.

    Parameters
    ----------
    text : str
        Date/time tokens, e.g. ``"2025/08/22 06:40"``.
    fmt : str or DateFormat
        One of the :data:`DATE_FORMATS` patterns.

    Returns
    -------
    pd.Timestamp
        Naive timestamp at second resolution.

    Raises
    ------
    ValueError
        If a token is not an integer, a token is missing, or the fields do
        not form a valid calendar date and time.
    """
    date_format = get_date_format(fmt)
    parts = [p for p in _TOKEN_SPLIT.split(text.strip()) if p]

    second = 0
    if date_format.has_seconds:
        if not parts:
            raise ValueError(f"Missing seconds in '{text}'.")
        second = int(parts.pop())

    if len(parts) < 5:
        raise ValueError(
            f"Expected date and time tokens for '{date_format.pattern}', "
            f"got '{text}'."
        )
    minute = int(parts[-1])
    hour = int(parts[-2])

    date_values = dict(zip(date_format.fields, (int(p) for p in parts[:3])))
    year = date_values['year']
    if date_format.year_digits == 2:
        year += 2000

    try:
        return pd.Timestamp(
            year=year,
            month=date_values['month'],
            day=date_values['day'],
            hour=hour,
            minute=minute,
            second=second,
        )
    except OverflowError as exc:
        raise ValueError(f"Date field out of range in '{text}'.") from exc


def format_timestamp(ts: pd.Timestamp, fmt: str | DateFormat) -> str:
    """Render *ts* in one of the supported input formats."""
    date_format = get_date_format(fmt)
    if date_format.year_digits == 4:
        year = f'{ts.year:04d}'
    else:
        year = f'{ts.year % 100:02d}'
    fields = {'year': year, 'month': f'{ts.month:02d}', 'day': f'{ts.day:02d}'}

    text = '/'.join(fields[name] for name in date_format.fields)
    text += f' {ts.hour:02d}:{ts.minute:02d}'
    if date_format.has_seconds:
        text += f':{ts.second:02d}'
    return text


def format_display(ts: pd.Timestamp) -> str:
    return format_timestamp(ts, DISPLAY_FORMAT)


def format_for_export(ts: pd.Timestamp, pattern: str) -> str:
    """
    Render *ts* with a free-form export pattern.

    The pattern may use ``yyyy``, ``yy``, ``mm``, ``dd``, ``hh`` and ``ss``;
    anything else is copied literally.  ``mm`` is the minute when the
    previous token is ``hh`` or the month has already been written, and the
    month otherwise, so ``"mm/dd/yyyy hh:mm"`` and ``"hh:mm dd.mm.yy"`` both
    come out right.
    """
    previous = None
    seen_month = False

    def _substitute(match: re.Match) -> str:
        nonlocal previous, seen_month
        token = match.group(0)
        after_hour = previous == 'hh'
        previous = token
        if token == 'yyyy':
            return f'{ts.year:04d}'
        if token == 'yy':
            return f'{ts.year % 100:02d}'
        if token == 'dd':
            return f'{ts.day:02d}'
        if token == 'hh':
            return f'{ts.hour:02d}'
        if token == 'ss':
            return f'{ts.second:02d}'
        if after_hour or seen_month:
            return f'{ts.minute:02d}'
        seen_month = True
        return f'{ts.month:02d}'

    return _EXPORT_TOKENS.sub(_substitute, pattern)

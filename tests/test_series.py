"""
Unit tests for the series subpackage.

Tests cover:
- Date formats: parsing, formatting and export patterns
- Series builder: sorting, skipped lines, line numbering
- Interval validation and gap interpolation
- Downsampling and undo
- Text export and windowing
"""
import numpy as np
import pandas as pd
import pytest

SCENARIO = (
    '2025/08/22 06:40 -0.26\n'
    '2025/08/22 06:50 -0.31\n'
    '2025/08/22 07:10 -0.40'
)


def _regular_series(n=10, step_minutes=10, start='2025-08-22 00:00'):
    from tide_processor.series.observations import TideSeries

    times = pd.date_range(start, periods=n, freq=f'{step_minutes}min')
    return TideSeries.from_arrays(times, np.arange(n, dtype=float))


# -----------------------------------------------------------------------
# Date format tests
# -----------------------------------------------------------------------

class TestDateFormats:
    """Tests for date_formats.py."""

    def test_twelve_formats(self):
        """Every year width, field order and seconds option is declared."""
        from tide_processor.series.date_formats import DATE_FORMATS
        assert len(DATE_FORMATS) == 12
        assert 'yyyy/mm/dd hh:mm:ss' in DATE_FORMATS
        assert 'dd/mm/yy hh:mm' in DATE_FORMATS

    def test_round_trip_every_format(self):
        """format followed by parse returns the same second-resolution time."""
        from tide_processor.series.date_formats import (
            DATE_FORMATS,
            format_timestamp,
            parse_timestamp,
        )

        ts = pd.Timestamp('2025-08-22 06:40:17')
        for pattern, date_format in DATE_FORMATS.items():
            expected = ts if date_format.has_seconds else ts.floor('min')
            text = format_timestamp(ts, pattern)
            assert parse_timestamp(text, pattern) == expected, pattern

    def test_two_digit_year(self):
        from tide_processor.series.date_formats import parse_timestamp
        assert parse_timestamp('22/08/25 06:40', 'dd/mm/yy hh:mm') == \
            pd.Timestamp('2025-08-22 06:40')

    def test_field_order(self):
        """The three leading tokens follow the format's field order."""
        from tide_processor.series.date_formats import parse_timestamp
        ts = parse_timestamp('08/02/2025 01:02:03', 'mm/dd/yyyy hh:mm:ss')
        assert (ts.month, ts.day, ts.second) == (8, 2, 3)

    def test_invalid_calendar_date_raises(self):
        from tide_processor.series.date_formats import parse_timestamp
        with pytest.raises(ValueError):
            parse_timestamp('2025/02/30 00:00', 'yyyy/mm/dd hh:mm')

    def test_out_of_range_field_raises(self):
        """Fields too large for a timestamp raise ValueError, not OverflowError."""
        from tide_processor.series.date_formats import parse_timestamp
        with pytest.raises(ValueError):
            parse_timestamp('2025/08/22 06:99999999999999999999', 'yyyy/mm/dd hh:mm')
        with pytest.raises(ValueError):
            parse_timestamp('99999999999/08/22 06:40', 'yyyy/mm/dd hh:mm')

    def test_missing_tokens_raise(self):
        from tide_processor.series.date_formats import parse_timestamp
        with pytest.raises(ValueError):
            parse_timestamp('2025/08/22', 'yyyy/mm/dd hh:mm')

    def test_unknown_format_raises(self):
        from tide_processor.series.date_formats import parse_timestamp
        with pytest.raises(ValueError, match='Unsupported date format'):
            parse_timestamp('2025-08-22 06:40', 'yyyy-mm-dd hh:mm')

    def test_export_month_then_minute(self):
        """mm before any hour is the month; mm after hh is the minute."""
        from tide_processor.series.date_formats import format_for_export
        ts = pd.Timestamp('2025-08-22 06:40:05')
        assert format_for_export(ts, 'mm/dd/yyyy hh:mm') == '08/22/2025 06:40'
        assert format_for_export(ts, 'dd/mm/yyyy hh:mm:ss') == \
            '22/08/2025 06:40:05'

    def test_export_time_first(self):
        """A leading time keeps the later mm as the month."""
        from tide_processor.series.date_formats import format_for_export
        ts = pd.Timestamp('2025-08-22 06:40')
        assert format_for_export(ts, 'hh:mm dd.mm.yy') == '06:40 22.08.25'

    def test_export_literals_copied(self):
        from tide_processor.series.date_formats import format_for_export
        ts = pd.Timestamp('2025-08-22 06:40')
        assert format_for_export(ts, 'yyyy-mm-ddThh:mm') == '2025-08-22T06:40'


# -----------------------------------------------------------------------
# Series builder tests
# -----------------------------------------------------------------------

class TestParseSeries:
    """Tests for parsing.py."""

    def test_scenario_parsed(self):
        from tide_processor.series.parsing import parse_series
        result = parse_series(SCENARIO, 'yyyy/mm/dd hh:mm')
        assert len(result.series) == 3
        assert result.skipped == 0
        assert result.series[1].value == pytest.approx(-0.31)

    def test_sorted_output(self):
        """Out-of-order input is sorted ascending by timestamp."""
        from tide_processor.series.parsing import parse_series
        text = (
            '2025/08/22 07:10 3\n'
            '2025/08/22 06:40 1\n'
            '2025/08/22 06:50 2\n'
        )
        series = parse_series(text, 'yyyy/mm/dd hh:mm').series
        times = series.times
        assert all(times[i] <= times[i + 1] for i in range(len(times) - 1))
        assert list(series.values) == [1.0, 2.0, 3.0]
        # line numbers follow the input, not the sorted order
        assert [o.source_line for o in series] == [2, 3, 1]

    def test_bad_lines_skipped(self):
        """Malformed lines are reported and the rest still load."""
        from tide_processor.series.parsing import parse_series
        text = (
            '2025/08/22 06:40 -0.26\n'
            'garbage\n'
            '\n'
            '2025/08/22 06:50 abc\n'
            '2025/08/22 07:00 -0.30\n'
        )
        result = parse_series(text, 'yyyy/mm/dd hh:mm')
        assert len(result.series) == 2
        assert [w.line_number for w in result.warnings] == [2, 3]

    def test_oversized_minute_skipped(self):
        """A time field too large for a timestamp skips only that line."""
        from tide_processor.series.parsing import parse_series
        text = (
            '2025/08/22 06:40 -0.26\n'
            '2025/08/22 06:99999999999999999999 1.0\n'
            '2025/08/22 06:50 -0.31\n'
        )
        result = parse_series(text, 'yyyy/mm/dd hh:mm')
        assert len(result.series) == 2
        assert [w.line_number for w in result.warnings] == [2]

    def test_oversized_year_skipped(self):
        from tide_processor.series.parsing import parse_series
        text = (
            '2025/08/22 06:40 -0.26\n'
            '99999999999/08/22 06:45 1.0\n'
        )
        result = parse_series(text, 'yyyy/mm/dd hh:mm')
        assert len(result.series) == 1
        assert result.warnings[0].line_number == 2

    def test_blank_lines_not_numbered(self):
        from tide_processor.series.parsing import parse_series
        text = '\n\n2025/08/22 06:40 1\n\n2025/08/22 06:50 2\n'
        series = parse_series(text, 'yyyy/mm/dd hh:mm').series
        assert [o.source_line for o in series] == [1, 2]

    def test_unsorted_series_rejected(self):
        from tide_processor.series.observations import Observation, TideSeries
        a = Observation(pd.Timestamp('2025-01-01 01:00'), 1.0, 1)
        b = Observation(pd.Timestamp('2025-01-01 00:00'), 2.0, 2)
        with pytest.raises(ValueError):
            TideSeries([a, b])


# -----------------------------------------------------------------------
# Interval validation and interpolation tests
# -----------------------------------------------------------------------

class TestIntervals:
    """Tests for intervals.py."""

    def test_interval_to_ms(self):
        from tide_processor.series.intervals import interval_to_ms
        assert interval_to_ms(10, 'minutes') == 600_000
        assert interval_to_ms('1', 'hours') == 3_600_000
        assert interval_to_ms(30, 'seconds') == 30_000
        assert interval_to_ms(1, 'days') == 86_400_000

    def test_interval_to_ms_rejects_bad_input(self):
        from tide_processor.series.intervals import interval_to_ms
        with pytest.raises(ValueError):
            interval_to_ms(10, 'fortnights')
        with pytest.raises(ValueError):
            interval_to_ms('ten', 'minutes')

    def test_regular_series_has_no_issues(self):
        from tide_processor.series.intervals import check_interval
        report = check_interval(_regular_series(50), 600_000)
        assert report.total == 49
        assert report.ok

    def test_short_series_gives_no_report(self):
        from tide_processor.series.intervals import check_interval
        assert check_interval(_regular_series(1), 600_000) is None

    def test_tolerance(self):
        """Steps within one second of the expected interval pass."""
        from tide_processor.series.intervals import check_interval
        from tide_processor.series.observations import TideSeries
        times = pd.DatetimeIndex([
            '2025-01-01 00:00:00', '2025-01-01 00:10:01', '2025-01-01 00:20:03',
        ])
        report = check_interval(TideSeries.from_arrays(times, [0, 1, 2]), 600_000)
        assert len(report.issues) == 1
        assert report.issues[0].actual_sec == pytest.approx(602.0)

    def test_scenario(self):
        """One 20 minute gap yields one issue and one inserted point."""
        from tide_processor.series.intervals import check_interval, interpolate_gaps
        from tide_processor.series.parsing import parse_series

        series = parse_series(SCENARIO, 'yyyy/mm/dd hh:mm').series
        report = check_interval(series, 600_000)
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert (issue.line1, issue.line2) == (2, 3)
        assert issue.date1 == '22/08/2025 06:50:00'
        assert issue.actual_sec == pytest.approx(1200.0)

        filled = interpolate_gaps(series, report)
        assert len(filled) == 4
        inserted = filled[2]
        assert inserted.interpolated
        assert inserted.timestamp == pd.Timestamp('2025-08-22 07:00')
        assert inserted.value == pytest.approx(-0.355)
        assert inserted.source_line == 2.5

    def test_thirty_minute_gap(self):
        """A 30 minute gap at a 10 minute step gets two points."""
        from tide_processor.series.intervals import check_interval, interpolate_gaps
        from tide_processor.series.observations import TideSeries

        times = pd.DatetimeIndex(['2025-01-01 00:00', '2025-01-01 00:30'])
        series = TideSeries.from_arrays(times, [0.0, 3.0])
        filled = interpolate_gaps(series, check_interval(series, 600_000))

        assert len(filled) == 4
        assert list(filled.values) == pytest.approx([0.0, 1.0, 2.0, 3.0])
        assert list(filled.interpolated_mask) == [False, True, True, False]
        assert check_interval(filled, 600_000).ok

    def test_no_report_is_noop(self):
        from tide_processor.series.intervals import interpolate_gaps
        series = _regular_series(5)
        assert interpolate_gaps(series, None) is series


# -----------------------------------------------------------------------
# Downsampling tests
# -----------------------------------------------------------------------

class TestDownsampling:
    """Tests for downsampling.py."""

    def test_downsample_keeps_target_spacing(self):
        from tide_processor.series.downsampling import downsample
        series = _regular_series(13, step_minutes=10)
        result = downsample(series, 3_600_000)
        assert len(result) == 3
        assert result[0] == series[0]
        assert list(result.values) == [0.0, 6.0, 12.0]

    def test_tolerance_keeps_near_misses(self):
        """An observation one second short of the target is still kept."""
        from tide_processor.series.downsampling import downsample
        from tide_processor.series.observations import TideSeries
        times = pd.DatetimeIndex(['2025-01-01 00:00:00', '2025-01-01 00:59:59'])
        result = downsample(TideSeries.from_arrays(times, [1, 2]), 3_600_000)
        assert len(result) == 2

    def test_undo_restores(self):
        from tide_processor.series.downsampling import downsample_with_history, undo
        series = _regular_series(30)
        smaller, history = downsample_with_history(series, (), 1_800_000)
        assert len(history) == 1
        restored, history = undo(smaller, history)
        assert restored == series
        assert history == ()

    def test_empty_series_not_pushed(self):
        from tide_processor.series.downsampling import downsample_with_history
        from tide_processor.series.observations import TideSeries
        empty = TideSeries()
        result, history = downsample_with_history(empty, (), 600_000)
        assert len(result) == 0
        assert history == ()

    def test_undo_empty_history(self):
        from tide_processor.series.downsampling import undo
        series = _regular_series(3)
        assert undo(series, ()) == (series, ())


# -----------------------------------------------------------------------
# Export and windowing tests
# -----------------------------------------------------------------------

class TestExportAndWindow:
    """Tests for export.py and TideSeries windowing."""

    def test_export_marks_interpolated(self):
        from tide_processor.series.export import export_text
        from tide_processor.series.intervals import check_interval, interpolate_gaps
        from tide_processor.series.parsing import parse_series

        series = parse_series(SCENARIO, 'yyyy/mm/dd hh:mm').series
        filled = interpolate_gaps(series, check_interval(series, 600_000))
        lines = export_text(filled, 'dd/mm/yyyy hh:mm').splitlines()

        assert lines[0] == '22/08/2025 06:40\t-0.26'
        assert lines[2].startswith('22/08/2025 07:00\t')
        assert lines[2].endswith('\t(interpolated)')
        assert not lines[3].endswith('(interpolated)')

    def test_integral_values_printed_plainly(self):
        from tide_processor.series.export import format_value
        assert format_value(2.0) == '2'
        assert format_value(-0.355) == '-0.355'

    def test_write_export(self, tmp_path):
        from tide_processor.series.export import write_export
        path = tmp_path / 'out' / 'series.txt'
        write_export(_regular_series(3), str(path), 'yyyy/mm/dd hh:mm')
        assert path.read_text().splitlines()[1] == '2025/08/22 00:10\t1'

    def test_window_percentages(self):
        series = _regular_series(10)
        assert len(series.window(0, 100)) == 10
        window = series.window(20, 50)
        assert list(window.values) == [2.0, 3.0, 4.0]
        assert len(series.window(50, 50)) == 0

    def test_chart_view_columns(self):
        view = _regular_series(4).chart_view()
        assert list(view.columns) == ['time', 'tide', 'interpolated']
        assert view['time'].iloc[0] == '22/08/2025 00:00:00'

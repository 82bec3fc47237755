"""
Unit tests for the processing session and the background analysis runner.
"""
import numpy as np
import pandas as pd
import pytest

SCENARIO = (
    '2025/08/22 06:40 -0.26\n'
    '2025/08/22 06:50 -0.31\n'
    '2025/08/22 07:10 -0.40'
)


def _regular_text(n=10, step_minutes=10):
    times = pd.date_range('2025-08-22 00:00', periods=n, freq=f'{step_minutes}min')
    return '\n'.join(
        f"{ts.strftime('%Y/%m/%d %H:%M')} {i}" for i, ts in enumerate(times)
    )


def _tidal_series(duration_days=5):
    from tide_processor.series.observations import TideSeries
    times = pd.date_range('2024-01-01', periods=duration_days * 240, freq='6min')
    hours = np.arange(len(times)) / 10.0
    return TideSeries.from_arrays(
        times, 1.0 + 0.5 * np.cos(np.radians(28.9841042 * hours - 45.0)),
    )


# -----------------------------------------------------------------------
# Session tests
# -----------------------------------------------------------------------

class TestSessionState:
    """Tests for session.py."""

    def test_load_resets_state(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(_regular_text(30))
        state = state.downsample(1, 'hours').set_window(10, 20)

        reloaded = state.load_text(SCENARIO)
        assert len(reloaded.series) == 3
        assert reloaded.history == ()
        assert reloaded.window == (0.0, 100.0)
        assert reloaded.interval_report is None
        assert reloaded.analysis_result is None
        # the previous state is untouched
        assert len(state.history) == 1

    def test_warnings_recorded(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(SCENARIO + '\nnot a record')
        assert len(state.series) == 3
        assert [w.line_number for w in state.warnings] == [4]

    def test_check_then_interpolate(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(SCENARIO).check_interval(10, 'minutes')
        assert len(state.interval_report.issues) == 1

        filled = state.interpolate()
        assert len(filled.series) == 4
        assert filled.interval_report is None
        assert filled.series[2].value == pytest.approx(-0.355)

        views = filled.interpolation_views()
        assert len(views) == 1
        assert len(views[0]) == 4

    def test_interpolate_without_report_is_noop(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(SCENARIO)
        assert state.interpolate() is state

    def test_downsample_and_undo(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(_regular_text(13))
        state = state.check_interval(10, 'minutes')

        smaller = state.downsample(1, 'hours')
        assert len(smaller.series) == 3
        assert smaller.can_undo
        assert smaller.interval_report is None

        restored = smaller.undo()
        assert restored.series == state.series
        assert not restored.can_undo
        assert restored.undo() is restored

    def test_invalid_unit_raises(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(SCENARIO)
        with pytest.raises(ValueError):
            state.check_interval(10, 'weeks')

    def test_apply_date_range(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(_regular_text(10))
        state = state.apply_date_range('22/08/2025 00:20:00', '22/08/2025 00:50:00')
        assert list(state.windowed_series.values) == [2.0, 3.0, 4.0, 5.0]
        assert state.window_dates() == ('22/08/2025 00:20:00', '22/08/2025 00:50:00')

    def test_apply_date_range_uneven_split(self):
        """Percentages derived from indices map back to the same indices."""
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(_regular_text(7))
        state = state.apply_date_range('22/08/2025 00:00:00', '22/08/2025 00:20:00')
        assert len(state.windowed_series) == 3

    def test_invalid_date_range(self):
        from tide_processor.series.session import InvalidDateRangeError, SessionState
        state = SessionState().load_text(_regular_text(10))
        with pytest.raises(InvalidDateRangeError, match='dd/mm/yyyy hh:mm:ss'):
            state.apply_date_range('2025-08-22', '22/08/2025 00:50:00')
        with pytest.raises(InvalidDateRangeError):
            state.apply_date_range('22/08/2025 01:00:00', '22/08/2025 00:00:00')
        with pytest.raises(InvalidDateRangeError):
            state.apply_date_range('22/08/99999999999 00:00:00', '22/08/2025 00:50:00')
        assert state.window == (0.0, 100.0)

    def test_export_uses_export_format(self):
        from tide_processor.series.session import SessionState
        state = SessionState(export_format='hh:mm dd.mm.yy').load_text(SCENARIO)
        assert state.export_text().splitlines()[0] == '06:40 22.08.25\t-0.26'

    def test_chart_view_follows_window(self):
        from tide_processor.series.session import SessionState
        state = SessionState().load_text(_regular_text(10)).set_window(0, 50)
        assert len(state.chart_view()) == 5

    def test_analyze(self):
        from tide_processor.series.session import SessionState
        state = SessionState(series=_tidal_series()).analyze('simplified')
        m2 = state.analysis_result.constituents['M2']
        assert m2.amplitude == pytest.approx(0.5, rel=0.02)

    def test_empty_window_keeps_previous_result(self):
        from tide_processor.series.session import SessionState
        state = SessionState(series=_tidal_series()).analyze('simplified')
        previous = state.analysis_result

        empty = state.set_window(50, 50).analyze('admiralty')
        assert empty.analysis_result is previous

    def test_engine_fault_becomes_analysis_error(self, monkeypatch):
        from tide_processor.series import session

        def _broken(*args, **kwargs):
            raise FloatingPointError('overflow')

        monkeypatch.setattr(session, 'harmonic_analysis', _broken)
        state = session.SessionState(series=_tidal_series(1))
        with pytest.raises(session.AnalysisError):
            state.analyze('simplified')
        assert state.analysis_result is None

    def test_unknown_method_is_value_error(self):
        from tide_processor.series.session import SessionState
        state = SessionState(series=_tidal_series(1))
        with pytest.raises(ValueError):
            state.analyze('least-squares')


# -----------------------------------------------------------------------
# Background runner tests
# -----------------------------------------------------------------------

class TestAnalysisRunner:
    """Tests for tasks.py."""

    def test_submit_and_publish(self):
        from tide_processor.tidal_analysis.tasks import AnalysisRunner
        with AnalysisRunner() as runner:
            handle = runner.submit(_tidal_series(), 'simplified')
            result = handle.result(timeout=60)
            assert result is not None
            assert runner.latest_result is result
            assert handle.error is None

    def test_newer_submission_supersedes(self):
        """Only the most recent submission publishes its result."""
        from tide_processor.tidal_analysis.tasks import AnalysisRunner
        with AnalysisRunner(delay_seconds=0.5) as runner:
            first = runner.submit(_tidal_series(), 'ttide')
            second = runner.submit(_tidal_series(), 'simplified')

            assert first.result(timeout=60) is None
            assert first.cancelled
            result = second.result(timeout=60)
            assert result.method == 'simplified'
            assert runner.latest_result is result
            assert runner.current is second

    def test_failure_not_published(self):
        from tide_processor.tidal_analysis.tasks import AnalysisRunner
        with AnalysisRunner() as runner:
            ok = runner.submit(_tidal_series(), 'simplified').result(timeout=60)
            handle = runner.submit(_tidal_series(), 'utide')  # no latitude
            with pytest.raises(ValueError):
                handle.result(timeout=60)
            assert isinstance(handle.error, ValueError)
            assert runner.latest_result is ok

    def test_empty_window(self):
        from tide_processor.series.observations import TideSeries
        from tide_processor.tidal_analysis.tasks import AnalysisRunner
        with AnalysisRunner() as runner:
            assert runner.submit(TideSeries()).result(timeout=60) is None
            assert runner.latest_result is None

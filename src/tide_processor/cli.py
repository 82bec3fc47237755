"""
Command line front end.

Loads a tide record, optionally validates and cleans it, runs a harmonic
analysis over a window and writes the cleaned series back out::

    tide-processor gauge.txt --date-format "dd/mm/yyyy hh:mm" \\
        --check-interval 10 minutes --interpolate --method ttide
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .series.date_formats import DATE_FORMATS
from .series.export import write_export
from .series.session import AnalysisError, InvalidDateRangeError, SessionState
from .tidal_analysis.harmonic_analysis import METHOD_LABELS, TIME_BASES
from .utils import Utils, setup_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tide-processor',
        description='Clean tide gauge records and estimate tidal constituents',
    )
    parser.add_argument('input', help='Text file of "<date> <time> <value>" records')
    parser.add_argument('--config', help='Path to tide_processor.conf')
    parser.add_argument('--date-format', choices=sorted(DATE_FORMATS),
                        help='Date format of the input records')
    parser.add_argument('--check-interval', nargs=2, metavar=('AMOUNT', 'UNIT'),
                        help='Report steps deviating from the expected interval')
    parser.add_argument('--interpolate', action='store_true',
                        help='Fill the gaps found by --check-interval')
    parser.add_argument('--downsample', nargs=2, metavar=('AMOUNT', 'UNIT'),
                        help='Keep one observation per target interval')
    parser.add_argument('--window', nargs=2, type=float, metavar=('LO', 'HI'),
                        help='Analysis window as a percentage range')
    parser.add_argument('--start', help='Window start, dd/mm/yyyy hh:mm:ss')
    parser.add_argument('--end', help='Window end, dd/mm/yyyy hh:mm:ss')
    parser.add_argument('--method', choices=list(METHOD_LABELS),
                        help='Harmonic analysis method')
    parser.add_argument('--no-analysis', action='store_true',
                        help='Skip the harmonic analysis')
    parser.add_argument('--latitude', type=float,
                        help='Station latitude (utide method)')
    parser.add_argument('--rayleigh', type=float,
                        help='Rayleigh criterion factor (ttide method)')
    parser.add_argument('--time-basis', choices=TIME_BASES,
                        help='Sample times for the ttide method')
    parser.add_argument('--export', help='Write the processed series to this path')
    parser.add_argument('--export-format',
                        help='Date pattern of the export, e.g. "dd/mm/yyyy hh:mm:ss"')
    return parser


def _analysis_options(method: str, args, settings: dict[str, str]) -> dict:
    if method == 'ttide':
        rayleigh = args.rayleigh if args.rayleigh is not None else float(settings['rayleigh'])
        return {
            'rayleigh': rayleigh,
            'time_basis': args.time_basis or settings['time_basis'],
        }
    if method == 'utide':
        latitude = args.latitude
        if latitude is None and settings.get('latitude'):
            latitude = float(settings['latitude'])
        return {'latitude': latitude}
    return {}


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logger = setup_logger()

    utils = Utils(args.config)
    logger.info('Using config %s', utils.get_config_file())
    parsing = utils.read_config_section('parsing', logger)
    interval = utils.read_config_section('interval', logger)
    analysis = utils.read_config_section('analysis', logger)

    state = SessionState(
        date_format=args.date_format or parsing['date_format'],
        export_format=args.export_format or parsing['export_date_format'],
    )

    try:
        text = Path(args.input).read_text()
    except OSError as exc:
        logger.error('Cannot read %s: %s', args.input, exc)
        return 1

    try:
        state = state.load_text(text, logger=logger)
        logger.info('Loaded %d observations (%d lines skipped).',
                    len(state.series), len(state.warnings))

        if args.check_interval or args.interpolate:
            amount, unit = args.check_interval or (interval['amount'], interval['unit'])
            state = state.check_interval(amount, unit, logger=logger)
            report = state.interval_report
            if report is not None:
                print(f'Interval check: {len(report.issues)} issue(s) in '
                      f'{report.total} steps')
                for issue in report.issues:
                    print(f'  lines {issue.line1:g}-{issue.line2:g}: '
                          f'{issue.date1} -> {issue.date2} '
                          f'expected {issue.expected_sec}s, got {issue.actual_sec}s')
        if args.interpolate:
            state = state.interpolate(logger=logger)
        if args.downsample:
            state = state.downsample(*args.downsample, logger=logger)

        if args.window:
            state = state.set_window(*args.window)
        if args.start or args.end:
            dates = state.window_dates()
            if dates is not None:
                state = state.apply_date_range(args.start or dates[0],
                                               args.end or dates[1])
    except InvalidDateRangeError as exc:
        logger.error('%s', exc)
        return 2
    except ValueError as exc:
        logger.error('Invalid setting: %s', exc)
        return 2

    if not args.no_analysis:
        method = args.method or analysis['method']
        try:
            state = state.analyze(
                method, logger=logger,
                **_analysis_options(method, args, analysis),
            )
        except (AnalysisError, ValueError) as exc:
            logger.error('%s', exc)
            return 1
        result = state.analysis_result
        if result is None:
            logger.warning('No data in the analysis window.')
        else:
            span = result.time_span
            print(result.label)
            print(f'Data points: {result.data_point_count}  '
                  f'Span: {span.start_formatted} - {span.end_formatted} '
                  f'({span.days:.2f} days)')
            print(f'Mean sea level (Z0): {result.mean_sea_level:.4f}')
            print(result.to_frame().to_string(index=False))

    if args.export:
        write_export(state.series, args.export, state.export_format, logger=logger)

    return 0


if __name__ == '__main__':
    sys.exit(main())

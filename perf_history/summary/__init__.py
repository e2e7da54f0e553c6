from .engine import TOTAL_LOOKBACK_WEEKS, WEEKS_IN_SUMMARY, build_summary, compare_windows, percent_change
from .median import MEDIAN_WINDOW_RUNS, median_of, median_window, window_runs

__all__ = [
    'MEDIAN_WINDOW_RUNS',
    'TOTAL_LOOKBACK_WEEKS',
    'WEEKS_IN_SUMMARY',
    'build_summary',
    'compare_windows',
    'median_of',
    'median_window',
    'percent_change',
    'window_runs',
]

"""
< Rolling weekly summary of one kind's run series >
1. For each of the last WEEKS_IN_SUMMARY weeks, compare the median window at the week start
   with the median window at the week end.
2. Compare the window TOTAL_LOOKBACK_WEEKS weeks before the last week start with the window
   one week past the last date, as the long-horizon total.
3. Pad every weekly map with an empty entry for each known benchmark that it lacks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Final

from perf_history.dates import ONE_WEEK, start_of_week, weeks
from perf_history.exceptions import InternalInvariantViolation
from perf_history.history_types import ByCrateValues
from perf_history.query.strategies import index_in
from perf_history.run import Run
from perf_history.schemas import MedianWindow, Summary

from .median import median_window

logger = logging.getLogger(__name__)

WEEKS_IN_SUMMARY: Final[int] = 12
TOTAL_LOOKBACK_WEEKS: Final[int] = 13


def percent_change(previous: float, current: float) -> float:
    """Percent change from `previous` (week N-1) to `current` (week N)."""
    return ((current - previous) / previous) * 100.0


def compare_windows(start: MedianWindow, end: MedianWindow) -> MedianWindow:
    """
    Percent change of every crate/phase present in both windows, labelled with the end date.

    A pair is left out unless both medians are strictly positive. A crate present in both
    windows is kept even when none of its phases qualify.
    """
    by_crate: ByCrateValues = {}
    for crate_name, start_phases in start.by_crate.items():
        end_phases = end.by_crate.get(crate_name)
        if end_phases is None:
            continue

        changes: dict[str, float] = {}
        for phase_name, previous in start_phases.items():
            current = end_phases.get(phase_name)
            if current is None:
                continue
            # A phase that is never positive at both ends of the summary never shows up in the totals.
            if previous > 0 and current > 0:
                changes[phase_name] = percent_change(previous, current)
        by_crate[crate_name] = changes

    return MedianWindow(date=end.date, by_crate=by_crate)


def _compare_week(series: Sequence[Run], week_start: datetime, week_end: datetime) -> MedianWindow:
    start_idx = index_in(series, week_start)
    end_idx = index_in(series, week_end)

    if start_idx == end_idx:
        if start_idx == 0:
            raise InternalInvariantViolation(
                f'Week {week_start:%Y-%m-%d} collapses onto the first run of the series; '
                'summaries need data reaching back before the summarized weeks.'
            )
        start_idx -= 1

    return compare_windows(
        median_window(series, start_idx, week_start),
        median_window(series, end_idx, week_end),
    )


def _compare_total(series: Sequence[Run], last_date: datetime) -> MedianWindow:
    start = start_of_week(last_date) - weeks(TOTAL_LOOKBACK_WEEKS)
    end = last_date + ONE_WEEK
    return compare_windows(
        median_window(series, index_in(series, start), start),
        median_window(series, index_in(series, end), end),
    )


def build_summary(series: Sequence[Run], last_date: datetime, benchmarks: Iterable[str]) -> Summary:
    """
    Build the weekly and total percent-change summary of a date-ascending series.

    Parameters
    ----------
    series:
        One kind's runs, sorted ascending by date.
    last_date:
        The latest run date across every kind.
    benchmarks:
        Benchmark names that every weekly map must report, even as an empty entry.

    Returns
    -------
    Summary
        `weekly[0]` covers the week of `last_date`, `weekly[i]` the week `i` weeks earlier.

    Raises
    ------
    InternalInvariantViolation
        If a week collapses onto the first run of the series.
    """
    benchmark_names = sorted(set(benchmarks))
    last_week = start_of_week(last_date)

    weekly: list[MedianWindow] = []
    for i in range(WEEKS_IN_SUMMARY):
        week_start = last_week - weeks(i)
        week_end = week_start + ONE_WEEK
        if series:
            weekly.append(_compare_week(series, week_start, week_end))
        else:
            weekly.append(MedianWindow(date=week_end))

    if series:
        total = _compare_total(series, last_date)
    else:
        logger.info('Summarizing an empty series; only benchmark placeholders are reported')
        total = MedianWindow(date=last_date + ONE_WEEK)

    for week in weekly:
        for name in benchmark_names:
            week.by_crate.setdefault(name, {})

    return Summary(total=total, weekly=weekly)

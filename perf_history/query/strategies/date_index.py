from __future__ import annotations

from bisect import bisect_left
from collections.abc import Sequence
from datetime import datetime
from operator import attrgetter

from perf_history.run import Run

_by_date = attrgetter('date')


def index_in(series: Sequence[Run], date: datetime) -> int:
    """
    < Locate `date` in a date-ascending series >
    1. Binary-search the insertion point of `date` (first run whose date is >= `date`).
    2. Clamp it to the last index, so a date past the end resolves to the last run.

    The result is always a valid index. Callers round a range start down to existing
    data by using it as-is, and include the run at a range end by adding 1.

    Raises
    ------
    ValueError
        If `series` is empty.
    """
    if not series:
        raise ValueError('index_in requires a non-empty series.')
    idx = bisect_left(series, date, key=_by_date)
    return min(idx, len(series) - 1)


class DateIndexStrategy:
    """
    <Inclusive date range over a sorted series>

    - start: index_in(series, start)
    - end:   index_in(series, end) + 1 (slice bound)

    An empty series yields an empty slice. A start that resolves past the end yields an empty slice.
    """

    @staticmethod
    def apply(series: Sequence[Run], *, start: datetime, end: datetime) -> Sequence[Run]:
        if not series:
            return series[:0]
        lo = index_in(series, start)
        hi = index_in(series, end) + 1
        return series[lo:hi]

    @staticmethod
    def nearest(series: Sequence[Run], date: datetime) -> Run:
        return series[index_in(series, date)]

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Annotated

from typing_extensions import Doc

from perf_history.dates import as_end, as_start
from perf_history.enums import Kind
from perf_history.history_types import OptionalDate
from perf_history.run import Run

from .strategies import DateIndexStrategy


class RangeQuery:
    """
    A small DSL for date-range reads over one kind's run series.

    This is a **pure state object**. Resolution against a series is done by a
    higher layer (`RunStore.execute` or `query_to_slice`).

    Design principles
    -----------------
    - `since()` and `until()` can each be called at most once.
    - An unset start means "earliest run"; an unset end means the store's last date.
    - The end bound rounds up to the first run at or after it, so the run nearest
      past the end is included.
    - Once resolved, the query is sealed and can no longer be modified.

    Typical usage
    -------------
    >>> q = store.range(Kind.FULL_COMPILER).since(datetime(2016, 8, 1)).until(datetime(2016, 9, 1))
    >>> runs = store.execute(q)
    """

    def __init__(self, kind: Kind) -> None:
        self.kind: Kind = Kind(kind)
        self._start: OptionalDate = None
        self._end: OptionalDate = None
        self._start_set: bool = False
        self._end_set: bool = False
        self._sealed: bool = False

    def _ensure_mutable(self) -> None:
        """
        Raises
        ------
        RuntimeError
            If the query was already resolved.
        """
        if self._sealed:
            raise RuntimeError('This query has already been used. Create a new RangeQuery.')

    def since(self, start: OptionalDate) -> RangeQuery:
        """
        Set the range start. None keeps the default (earliest run).

        Raises
        ------
        ValueError
            If the start was already set.
        """
        self._ensure_mutable()
        if self._start_set:
            raise ValueError('since() can be called only once.')
        self._start = start
        self._start_set = True
        return self

    def until(self, end: OptionalDate) -> RangeQuery:
        """
        Set the range end. None keeps the default (the store's last date).

        Raises
        ------
        ValueError
            If the end was already set.
        """
        self._ensure_mutable()
        if self._end_set:
            raise ValueError('until() can be called only once.')
        self._end = end
        self._end_set = True
        return self

    @property
    def start(self) -> Annotated[datetime | None, Doc('Requested range start (or None if unset).')]:
        return self._start

    @property
    def end(self) -> Annotated[datetime | None, Doc('Requested range end (or None if unset).')]:
        return self._end

    @property
    def sealed(self) -> Annotated[bool, Doc('True once the query has been resolved.')]:
        return self._sealed


def _build_range_query(q: RangeQuery, series: Sequence[Run], last_date: datetime) -> Sequence[Run]:
    """
    Resolve a RangeQuery against a date-ascending series.

    1. Resolve the open bounds (earliest / `last_date`).
    2. Slice the series via DateIndexStrategy.
    3. Seal the query.
    """
    out = DateIndexStrategy.apply(
        series,
        start=as_start(q.start),
        end=as_end(q.end, last_date),
    )
    q._sealed = True
    return out

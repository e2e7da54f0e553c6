from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from perf_history.run import Run

from .range_query import RangeQuery, _build_range_query


def query_to_slice(
    q: RangeQuery,
    series: Sequence[Run],
    last_date: datetime,
) -> Sequence[Run]:
    if isinstance(q, RangeQuery):
        return _build_range_query(q, series, last_date)

    raise TypeError(f'Unsupported query type: {type(q)}')

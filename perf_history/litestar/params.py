from __future__ import annotations

from datetime import datetime

from litestar.params import Parameter
from pydantic import BaseModel

from perf_history.enums import Kind
from perf_history.query.range_query import RangeQuery


class DateRangeParams(BaseModel):
    kind: Kind = Kind.FULL_COMPILER
    start: datetime | None = None
    end: datetime | None = None


def provide_date_range(
    kind: Kind = Parameter(default=Kind.FULL_COMPILER, query='kind', description='Run series: rustc or benchmarks'),
    start: datetime | None = Parameter(
        default=None,
        query='start',
        description='Range start (ISO 8601). Defaults to the earliest run.',
    ),
    end: datetime | None = Parameter(
        default=None,
        query='end',
        description='Range end (ISO 8601). Defaults to the latest run date.',
    ),
) -> DateRangeParams:
    return DateRangeParams(kind=kind, start=start, end=end)


def apply_date_range(q: RangeQuery, params: DateRangeParams) -> RangeQuery:
    """
    Apply date range parameters to a RangeQuery built for the same kind.
    """
    if q.kind is not params.kind:
        raise ValueError(f'RangeQuery is for {q.kind}, parameters ask for {params.kind}.')
    return q.since(params.start).until(params.end)

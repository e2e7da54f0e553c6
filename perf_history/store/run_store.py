from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime
from operator import attrgetter
from typing import Annotated

from typing_extensions import Doc

from perf_history.aggregator import TOTAL, aggregate_total
from perf_history.dates import as_end, as_start
from perf_history.enums import Edge, Kind
from perf_history.exceptions import NoData
from perf_history.query.converter import query_to_slice
from perf_history.query.range_query import RangeQuery
from perf_history.query.strategies import DateIndexStrategy
from perf_history.run import Run
from perf_history.schemas import Summary
from perf_history.summary import build_summary

logger = logging.getLogger(__name__)


class RunStoreBuilder:
    """
    Mutable collector used during a load cycle.

    Principles
    ----------
    - **One run per commit and kind**: a run whose commit is already present in its
      kind is merged into the stored run instead of being appended.
    - **Merge rule**: crates of the newer run are inserted; a crate name that already
      exists is overwritten and a warning is logged. For full-compiler runs the
      synthetic `total` crate is rebuilt from the merged crates.
    - **Freeze once**: `finalize()` sorts, derives the name sets and summaries, and
      returns an immutable RunStore. The builder cannot be used afterwards.
    """

    def __init__(self) -> None:
        self._series: dict[Kind, list[Run]] = {kind: [] for kind in Kind}
        # commit -> position in the kind's series
        self._by_commit: dict[Kind, dict[str, int]] = {kind: {} for kind in Kind}
        self._finalized: bool = False

    def _ensure_open(self) -> None:
        if self._finalized:
            raise RuntimeError('This builder has already been finalized. Create a new RunStoreBuilder.')

    def add(
        self,
        run: Annotated[Run, Doc('Freshly parsed run.')],
        *,
        source: Annotated[str | None, Doc('Name of the document the run came from, used in warnings.')] = None,
    ) -> Annotated[bool, Doc('True if the run was merged into an existing run with the same commit.')]:
        self._ensure_open()
        series = self._series[run.kind]
        position = self._by_commit[run.kind].get(run.commit)
        if position is None:
            self._by_commit[run.kind][run.commit] = len(series)
            series.append(run)
            return False

        existing = series[position]
        by_crate = dict(existing.by_crate)
        is_full = run.kind is Kind.FULL_COMPILER
        for crate_name, timings in run.by_crate.items():
            if is_full and crate_name == TOTAL:
                logger.debug(
                    'Ignoring %s crate from %s, commit %s; it is rebuilt from the merged crates',
                    TOTAL,
                    source or '<unknown>',
                    run.commit,
                )
                continue
            if crate_name in by_crate:
                logger.warning(
                    'Overwriting %s from %s, dated %s, commit %s',
                    crate_name,
                    source or '<unknown>',
                    run.date,
                    run.commit,
                )
            by_crate[crate_name] = timings

        if is_full:
            by_crate[TOTAL] = aggregate_total(by_crate)
        series[position] = replace(existing, by_crate=by_crate)
        return True

    def add_all(self, runs: Iterable[Run]) -> int:
        """Add every run; returns how many of them were merged."""
        return sum(1 for run in runs if self.add(run))

    def finalize(self) -> RunStore:
        """
        < Freeze the collected runs into a RunStore >
        1. Freeze every run and sort each kind's series ascending by date (stable for equal dates).
        2. Scan every run once: crate names (full-compiler only), phase names (all kinds), last date.
        3. Derive benchmark names from the crate keys of benchmark runs.
        4. Build the summary of each kind against the global last date.

        Raises
        ------
        NoData
            If no run was added.
        InternalInvariantViolation
            If the time distribution of a series cannot be summarized.
        """
        self._ensure_open()
        self._finalized = True

        by_date = attrgetter('date')
        series = {kind: tuple(sorted((r.frozen() for r in runs), key=by_date)) for kind, runs in self._series.items()}

        last_date: datetime | None = None
        crate_names: set[str] = set()
        phase_names: set[str] = set()
        for run in (*series[Kind.FULL_COMPILER], *series[Kind.BENCHMARKS]):
            if last_date is None or last_date < run.date:
                last_date = run.date
            if run.kind is Kind.FULL_COMPILER:
                crate_names.update(run.by_crate)
            phase_names.update(run.phase_names())

        if last_date is None:
            raise NoData('No runs were loaded.')

        benchmark_names = {name for run in series[Kind.BENCHMARKS] for name in run.by_crate}

        summaries = {kind: build_summary(runs, last_date, benchmark_names) for kind, runs in series.items()}

        return RunStore(
            series=series,
            summaries=summaries,
            crate_names=tuple(sorted(crate_names)),
            phase_names=tuple(sorted(phase_names)),
            benchmark_names=tuple(sorted(benchmark_names)),
            last_date=last_date,
        )


class RunStore:
    """
    Finalized, read-only snapshot of every loaded run.

    Instances come from `RunStoreBuilder.finalize()`; each kind's series is an
    ascending-by-date tuple of frozen runs whose `by_crate` mappings are read-only,
    and `summary()` hands out copies, so a store can be shared between readers
    without locking.
    """

    def __init__(
        self,
        *,
        series: dict[Kind, tuple[Run, ...]],
        summaries: dict[Kind, Summary],
        crate_names: tuple[str, ...],
        phase_names: tuple[str, ...],
        benchmark_names: tuple[str, ...],
        last_date: datetime,
    ) -> None:
        self._series = dict(series)
        self._summaries = dict(summaries)
        self._crate_names = crate_names
        self._phase_names = phase_names
        self._benchmark_names = benchmark_names
        self._last_date = last_date

    @property
    def crate_names(self) -> Annotated[tuple[str, ...], Doc('Sorted crate names seen in full-compiler runs.')]:
        return self._crate_names

    @property
    def phase_names(self) -> Annotated[tuple[str, ...], Doc('Sorted phase names seen in runs of either kind.')]:
        return self._phase_names

    @property
    def benchmark_names(self) -> Annotated[tuple[str, ...], Doc('Sorted crate names seen in benchmark runs.')]:
        return self._benchmark_names

    @property
    def last_date(self) -> Annotated[datetime, Doc('Latest run date across both kinds.')]:
        return self._last_date

    def runs(self, kind: Kind) -> Annotated[tuple[Run, ...], Doc('The full date-ascending series of a kind.')]:
        return self._series[Kind(kind)]

    def summary(
        self, kind: Kind
    ) -> Annotated[Summary, Doc('Weekly and total percent-change summary of a kind. Each call returns a private copy.')]:
        return self._summaries[Kind(kind)].model_copy(deep=True)

    def range(self, kind: Kind) -> Annotated[RangeQuery, Doc('RangeQuery DSL entrypoint (since/until).')]:
        """
        Start a date-range query.

        Example
        -------
        >>> q = store.range(Kind.BENCHMARKS).since(datetime(2016, 8, 1))
        >>> runs = store.execute(q)
        """
        return RangeQuery(kind)

    def execute(
        self,
        q: Annotated[RangeQuery, Doc('Range query built from `range()`.')],
    ) -> Annotated[Sequence[Run], Doc('Contiguous date-ascending slice of the series.')]:
        return query_to_slice(q, self.runs(q.kind), self._last_date)

    def range_query(
        self,
        kind: Annotated[Kind, Doc('Series to read.')],
        start: Annotated[datetime | None, Doc('Range start; None means the earliest run.')] = None,
        end: Annotated[datetime | None, Doc('Range end; None means the global last date.')] = None,
    ) -> Annotated[Sequence[Run], Doc('Runs from the start index to the end index, inclusive. Empty for an empty kind.')]:
        return self.execute(self.range(kind).since(start).until(end))

    def boundary_run(
        self,
        kind: Annotated[Kind, Doc('Series to read.')],
        date: Annotated[datetime | None, Doc('Target date; None uses the default of `edge`.')],
        edge: Annotated[Edge, Doc('START defaults to the earliest run, END to the global last date.')] = Edge.END,
    ) -> Annotated[Run, Doc('The run nearest to the resolved date.')]:
        """
        Return the single run nearest to a start or end date.

        Raises
        ------
        NoData
            If the kind has no runs.
        ValueError
            If `edge` is not a valid Edge.
        """
        series = self.runs(kind)
        if not series:
            raise NoData(f'No {Kind(kind)} runs are loaded.')

        edge = Edge(edge)
        resolved = as_start(date) if edge is Edge.START else as_end(date, self._last_date)
        return DateIndexStrategy.nearest(series, resolved)

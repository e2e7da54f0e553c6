from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Annotated, Any, Generic, cast

from typing_extensions import Doc

from perf_history.enums import Edge, Kind
from perf_history.history_types import TSchema
from perf_history.run import Run
from perf_history.schemas import RunSchema, Summary
from perf_history.store import RunStore
from perf_history.validator import validate_run_schema

logger = logging.getLogger(__name__)


class SnapshotHolder:
    """
    Holds the current RunStore and swaps it atomically on reload.

    Readers grab `current` once per request and keep using that snapshot; a
    reload never mutates a published store, it publishes a new one.
    """

    def __init__(self, store: RunStore | None = None) -> None:
        self._store = store
        self._lock = threading.Lock()

    @property
    def current(self) -> RunStore:
        store = self._store
        if store is None:
            raise RuntimeError('No snapshot has been loaded yet.')
        return store

    @property
    def loaded(self) -> bool:
        return self._store is not None

    def swap(self, store: RunStore) -> RunStore | None:
        """Publish `store` and return the previous snapshot (None on first load)."""
        with self._lock:
            previous, self._store = self._store, store
        return previous

    def reload(self, build: Callable[[], RunStore]) -> RunStore:
        """
        Build a new snapshot and publish it.

        `build` runs outside the lock. If it raises, the current snapshot stays
        published and the error propagates.
        """
        store = build()
        self.swap(store)
        logger.info('Published snapshot as of %s', store.last_date)
        return store


class PerfHistoryService(Generic[TSchema]):
    """
    Query interface consumed by a service layer.

    Every call reads the snapshot published at call time. With
    `convert_schema=True`, runs are returned as `run_schema` instances built via
    Pydantic `model_validate(...)` (`from_attributes=True` is enforced).
    """

    def __init__(
        self,
        holder: Annotated[SnapshotHolder, Doc('Holder of the published RunStore.')],
        *,
        run_schema: Annotated[
            type[TSchema] | None, Doc('Pydantic schema for converted runs. Defaults to RunSchema.')
        ] = None,
    ) -> None:
        schema = run_schema if run_schema is not None else RunSchema
        validate_run_schema(schema)
        self.holder = holder
        self.run_schema = cast(type[TSchema], schema)

    def _convert(self, run: Run, *, convert_schema: bool) -> Any:
        if not convert_schema:
            return run
        return self.run_schema.model_validate(run)

    def range_query(
        self,
        kind: Kind,
        start: datetime | None = None,
        end: datetime | None = None,
        *,
        convert_schema: Annotated[bool, Doc('Return run_schema objects instead of Runs.')] = False,
    ) -> list[Any]:
        runs = self.holder.current.range_query(kind, start, end)
        return [self._convert(r, convert_schema=convert_schema) for r in runs]

    def boundary_run(
        self,
        kind: Kind,
        date: datetime | None,
        edge: Edge = Edge.END,
        *,
        convert_schema: Annotated[bool, Doc('Return a run_schema object instead of a Run.')] = False,
    ) -> Any:
        run = self.holder.current.boundary_run(kind, date, edge)
        return self._convert(run, convert_schema=convert_schema)

    def summary(self, kind: Kind) -> Summary:
        return self.holder.current.summary(kind)

    def crate_names(self) -> list[str]:
        return list(self.holder.current.crate_names)

    def phase_names(self) -> list[str]:
        return list(self.holder.current.phase_names)

    def benchmark_names(self) -> list[str]:
        return list(self.holder.current.benchmark_names)

    def last_date(self) -> datetime:
        return self.holder.current.last_date

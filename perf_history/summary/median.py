from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Final

from perf_history.exceptions import InternalInvariantViolation
from perf_history.history_types import ByCrateValues
from perf_history.run import Run
from perf_history.schemas import MedianWindow

MEDIAN_WINDOW_RUNS: Final[int] = 3


def window_runs(series: Sequence[Run], index: int) -> list[Run]:
    """Return the run at `index` and up to two runs before it, most recent first."""
    return [series[i] for i in range(index, index - MEDIAN_WINDOW_RUNS, -1) if 0 <= i < len(series)]


def median_of(values: Sequence[float]) -> float:
    """Middle element of the sorted values; the upper one of the two middles for even counts."""
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def median_window(series: Sequence[Run], index: int, date: datetime) -> MedianWindow:
    """
    < Median time per crate and phase over the runs ending at `index` >
    1. Collect up to MEDIAN_WINDOW_RUNS runs ending at `index` (fewer near the start of the series).
    2. Gather each crate/phase time across those runs.
    3. Keep the median of each gathered list, labelled with `date`.

    Raises
    ------
    InternalInvariantViolation
        If a crate/phase ends up with no values.
    """
    collected: dict[str, dict[str, list[float]]] = {}
    for run in window_runs(series, index):
        for crate_name, phases in run.by_crate.items():
            by_phase = collected.setdefault(crate_name, {})
            for phase_name, timing in phases.items():
                by_phase.setdefault(phase_name, []).append(timing.time)

    by_crate: ByCrateValues = {}
    for crate_name, phases in collected.items():
        crate_medians: dict[str, float] = {}
        for phase_name, values in phases.items():
            if not values:
                raise InternalInvariantViolation(f'No values for {crate_name}/{phase_name} in median window at {date}')
            crate_medians[phase_name] = median_of(values)
        by_crate[crate_name] = crate_medians

    return MedianWindow(date=date, by_crate=by_crate)

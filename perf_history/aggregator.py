"""
< Build the crate -> phase -> Timing mapping of a run >
1. Every reported phase of every crate becomes a Timing; memory is looked up by phase name in the entry's rss map.
2. Every crate gets a synthetic `total` phase: percent 100, the entry's total time, and the largest phase memory.
3. Full-compiler runs also get a synthetic `total` crate that sums time and keeps the peak memory per phase.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final

from perf_history.schemas import RawCrateEntry, Timing

TOTAL: Final[str] = 'total'


def crate_timings(entry: RawCrateEntry) -> dict[str, Timing]:
    """Convert one crate entry into its phase -> Timing mapping, including the `total` phase."""
    rss = entry.rss or {}
    times: dict[str, Timing] = {
        phase_name: Timing(percent=phase.percent, time=phase.time, memory=rss.get(phase_name))
        for phase_name, phase in entry.times.items()
    }
    times[TOTAL] = Timing(percent=100.0, time=entry.total, memory=max(rss.values(), default=0))
    return times


def aggregate_total(by_crate: Mapping[str, Mapping[str, Timing]]) -> dict[str, Timing]:
    """
    < Aggregate every crate of a run into the synthetic `total` crate >
    1. Sum `time` per phase across crates (an existing `total` crate is ignored).
    2. Keep the running maximum of `memory` per phase, starting at 0.
    3. Express each phase as a percentage of the summed `total` phase time.
       The `total` phase is 100; every phase is 0 when the summed total time is not positive.
    """
    time_sums: dict[str, float] = {}
    memory_peaks: dict[str, int] = {}
    for crate_name, phases in by_crate.items():
        if crate_name == TOTAL:
            continue
        for phase_name, timing in phases.items():
            time_sums[phase_name] = time_sums.get(phase_name, 0.0) + timing.time
            memory_peaks[phase_name] = max(memory_peaks.get(phase_name, 0), timing.memory or 0)

    grand_total = time_sums.get(TOTAL, 0.0)
    totals: dict[str, Timing] = {}
    for phase_name, time_sum in time_sums.items():
        if phase_name == TOTAL:
            percent = 100.0
        elif grand_total > 0:
            percent = time_sum / grand_total * 100.0
        else:
            percent = 0.0
        totals[phase_name] = Timing(percent=percent, time=time_sum, memory=memory_peaks[phase_name])
    return totals


def make_times(entries: Sequence[RawCrateEntry], is_full_compiler: bool) -> dict[str, dict[str, Timing]]:
    """
    Build the `by_crate` mapping of a run.

    A crate name repeated within `entries` keeps the later entry. The `total`
    crate is added only when `is_full_compiler` is true.
    """
    by_crate: dict[str, dict[str, Timing]] = {}
    for entry in entries:
        by_crate[entry.crate] = crate_timings(entry)

    if is_full_compiler:
        by_crate[TOTAL] = aggregate_total(by_crate)
    return by_crate

from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pytest

from perf_history.aggregator import TOTAL
from perf_history.enums import Edge, Kind
from perf_history.exceptions import NoData
from perf_history.store import RunStore, RunStoreBuilder

from .builders import FIRST_MONDAY, history_runs, make_run, run_dates

DATES = run_dates()
LAST_FULL_COMMIT = f"rustc-{len(DATES) - 1:03d}"


def _builder(*, benchmarks: bool = True) -> RunStoreBuilder:
    builder = RunStoreBuilder()
    builder.add_all(history_runs(Kind.FULL_COMPILER))
    if benchmarks:
        builder.add_all(history_runs(Kind.BENCHMARKS, crate="helloworld", value=2.0))
    return builder


def _store(**kwargs) -> RunStore:
    return _builder(**kwargs).finalize()


def test_finalize_sorts_each_series_by_date() -> None:
    """
    < Each kind's series is ascending by date regardless of insertion order >
    1. Add the full-compiler history in reverse order.
    2. Finalize.
    3. Assert the series is ascending and complete.
    """
    # 1
    builder = RunStoreBuilder()
    builder.add_all(reversed(history_runs(Kind.FULL_COMPILER)))

    # 2
    store = builder.finalize()

    # 3
    runs = store.runs(Kind.FULL_COMPILER)
    assert [r.date for r in runs] == DATES
    assert isinstance(runs, tuple)


def test_equal_dates_keep_insertion_order() -> None:
    builder = _builder(benchmarks=False)
    builder.add(make_run(Kind.BENCHMARKS, DATES[0], "a", {"helloworld": {"total": 1.0}}))
    builder.add(make_run(Kind.BENCHMARKS, DATES[0], "b", {"helloworld": {"total": 1.0}}))
    builder.add_all(history_runs(Kind.BENCHMARKS, crate="helloworld")[1:])

    store = builder.finalize()

    assert [r.commit for r in store.runs(Kind.BENCHMARKS)[:2]] == ["a", "b"]


def test_name_sets_and_last_date() -> None:
    """
    < The store derives sorted name sets and the global last date >
    1. Build a store with full-compiler and benchmark history plus one later benchmark run.
    2. Assert crate names come from full-compiler runs only.
    3. Assert benchmark names come from benchmark runs and phase names from both kinds.
    4. Assert the last date is the latest run across both kinds.
    """
    # 1
    later = FIRST_MONDAY + timedelta(weeks=14, hours=1)
    builder = _builder()
    builder.add(make_run(Kind.BENCHMARKS, later, "late", {"regex": {"total": 3.0, "parsing": 1.0}}))
    store = builder.finalize()

    # 2
    assert store.crate_names == ("core",)

    # 3
    assert store.benchmark_names == ("helloworld", "regex")
    assert store.phase_names == ("parsing", "total")

    # 4
    assert store.last_date == later


def test_merge_disjoint_crates_rebuilds_total() -> None:
    """
    < A second run with the same commit is merged into the first >
    1. Add a full-compiler run that reuses the commit of the latest run with a new crate.
    2. Assert add() reports a merge.
    3. Assert the stored run holds both crates and a rebuilt `total` crate.
    """
    builder = _builder()

    # 1
    # 2
    assert builder.add(make_run(Kind.FULL_COMPILER, DATES[-1], LAST_FULL_COMMIT, {"std": {"total": 50.0}})) is True

    # 3
    store = builder.finalize()
    merged = store.runs(Kind.FULL_COMPILER)[-1]
    assert set(merged.by_crate) == {"core", "std", TOTAL}
    assert merged.by_crate[TOTAL][TOTAL].time == pytest.approx(150.0)
    assert len(store.runs(Kind.FULL_COMPILER)) == len(DATES)
    assert "std" in store.crate_names


def test_merge_overlapping_crate_overwrites_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    builder = _builder()
    incoming = make_run(Kind.FULL_COMPILER, DATES[-1], LAST_FULL_COMMIT, {"core": {"total": 80.0}})

    with caplog.at_level(logging.WARNING, logger="perf_history.store.run_store"):
        builder.add(incoming, source="rustc--late.json")

    assert "Overwriting core from rustc--late.json" in caplog.text
    assert LAST_FULL_COMMIT in caplog.text

    merged = builder.finalize().runs(Kind.FULL_COMPILER)[-1]
    assert merged.by_crate["core"][TOTAL].time == 80.0
    assert merged.by_crate[TOTAL][TOTAL].time == pytest.approx(80.0)


def test_merge_ignores_incoming_total_crate() -> None:
    builder = _builder()
    incoming = make_run(
        Kind.FULL_COMPILER,
        DATES[-1],
        LAST_FULL_COMMIT,
        {"std": {"total": 5.0}, TOTAL: {"total": 999.0}},
    )

    builder.add(incoming)

    merged = builder.finalize().runs(Kind.FULL_COMPILER)[-1]
    assert merged.by_crate[TOTAL][TOTAL].time == pytest.approx(105.0)


def test_benchmark_merge_adds_no_total_crate() -> None:
    builder = _builder()
    bench_commit = f"benchmarks-{len(DATES) - 1:03d}"

    assert builder.add(make_run(Kind.BENCHMARKS, DATES[-1], bench_commit, {"regex": {"total": 1.0}})) is True

    merged = builder.finalize().runs(Kind.BENCHMARKS)[-1]
    assert set(merged.by_crate) == {"helloworld", "regex"}


def test_same_commit_in_other_kind_is_not_merged() -> None:
    builder = _builder()

    merged = builder.add(make_run(Kind.BENCHMARKS, DATES[-1] + timedelta(minutes=1), LAST_FULL_COMMIT, {"x": {"total": 1.0}}))

    assert merged is False
    assert len(builder.finalize().runs(Kind.BENCHMARKS)) == len(DATES) + 1


def test_add_all_counts_merges() -> None:
    builder = RunStoreBuilder()
    runs = history_runs(Kind.FULL_COMPILER)

    assert builder.add_all(runs) == 0
    assert builder.add_all(history_runs(Kind.FULL_COMPILER)[:5]) == 5


def test_finalize_without_runs_raises_no_data() -> None:
    with pytest.raises(NoData):
        RunStoreBuilder().finalize()


def test_builder_cannot_be_used_after_finalize() -> None:
    """
    < A finalized builder rejects further use >
    1. Finalize a builder.
    2. Assert add() and finalize() raise RuntimeError.
    """
    # 1
    builder = _builder()
    builder.finalize()

    # 2
    with pytest.raises(RuntimeError):
        builder.add(make_run(Kind.FULL_COMPILER, DATES[0], "new", {"core": {"total": 1.0}}))
    with pytest.raises(RuntimeError):
        builder.finalize()


def test_range_query_defaults_cover_the_whole_series() -> None:
    store = _store()

    assert list(store.range_query(Kind.FULL_COMPILER)) == list(store.runs(Kind.FULL_COMPILER))


def test_range_query_bounds() -> None:
    """
    < range_query returns the runs from the start index to the end index inclusive >
    1. Query between the first two run dates, shifted by an hour.
    2. Assert the slice starts at the second run and includes the third run (rounded-up end).
    """
    store = _store()

    # 1
    runs = store.range_query(Kind.BENCHMARKS, DATES[0] + timedelta(hours=1), DATES[1] + timedelta(hours=1))

    # 2
    assert [r.date for r in runs] == [DATES[1], DATES[2]]


def test_range_dsl_matches_range_query() -> None:
    store = _store()
    q = store.range(Kind.FULL_COMPILER).since(DATES[3]).until(DATES[6])

    assert list(store.execute(q)) == list(store.range_query(Kind.FULL_COMPILER, DATES[3], DATES[6]))


def test_boundary_run_edges() -> None:
    """
    < boundary_run resolves open dates per edge and rounds up between runs >
    1. END with no date returns the latest run.
    2. START with no date returns the earliest run.
    3. A date between two runs returns the later run.
    """
    store = _store()
    runs = store.runs(Kind.FULL_COMPILER)

    # 1
    assert store.boundary_run(Kind.FULL_COMPILER, None) is runs[-1]

    # 2
    assert store.boundary_run(Kind.FULL_COMPILER, None, Edge.START) is runs[0]

    # 3
    assert store.boundary_run(Kind.FULL_COMPILER, DATES[4] + timedelta(minutes=1), Edge.START) is runs[5]


def test_boundary_run_rejects_unknown_edge() -> None:
    store = _store()

    with pytest.raises(ValueError):
        store.boundary_run(Kind.FULL_COMPILER, None, "middle")  # type: ignore[arg-type]


def test_empty_kind() -> None:
    """
    < A kind without runs reads as empty but still has a summary >
    1. Build a store from full-compiler runs only.
    2. Assert the benchmark series and range are empty.
    3. Assert boundary_run raises NoData.
    4. Assert the benchmark summary has twelve empty weeks.
    """
    # 1
    store = _store(benchmarks=False)

    # 2
    assert store.runs(Kind.BENCHMARKS) == ()
    assert list(store.range_query(Kind.BENCHMARKS)) == []

    # 3
    with pytest.raises(NoData):
        store.boundary_run(Kind.BENCHMARKS, datetime(2016, 2, 1))

    # 4
    summary = store.summary(Kind.BENCHMARKS)
    assert len(summary.weekly) == 12
    assert all(w.by_crate == {} for w in summary.weekly)


def test_summaries_are_built_per_kind() -> None:
    store = _store()

    full = store.summary(Kind.FULL_COMPILER)
    bench = store.summary(Kind.BENCHMARKS)

    assert full.weekly[0].by_crate == {"core": {"total": pytest.approx(0.0)}, "helloworld": {}}
    assert bench.weekly[0].by_crate == {"helloworld": {"total": pytest.approx(0.0)}}
    assert store.summary("benchmarks") == bench  # type: ignore[arg-type]


def test_merge_traces_ignored_total_crate(caplog: pytest.LogCaptureFixture) -> None:
    builder = _builder()
    incoming = make_run(Kind.FULL_COMPILER, DATES[-1], LAST_FULL_COMMIT, {TOTAL: {"total": 999.0}})

    with caplog.at_level(logging.DEBUG, logger="perf_history.store.run_store"):
        builder.add(incoming, source="rustc--late.json")

    assert "Ignoring total crate from rustc--late.json" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_merge_leaves_added_runs_untouched() -> None:
    """
    < Merging builds a new run instead of changing the runs passed to add() >
    1. Add a run, then a second run with the same commit.
    2. Assert neither of the added runs gained crates.
    3. Assert the finalized run is read-only and holds both crates.
    """
    # 1
    builder = _builder()
    first = make_run(Kind.FULL_COMPILER, DATES[-1] + timedelta(hours=1), "extra", {"core": {"total": 1.0}})
    second = make_run(Kind.FULL_COMPILER, DATES[-1] + timedelta(hours=1), "extra", {"std": {"total": 2.0}})
    builder.add(first)
    builder.add(second)

    # 2
    assert set(first.by_crate) == {"core"}
    assert set(second.by_crate) == {"std"}

    # 3
    stored = builder.finalize().runs(Kind.FULL_COMPILER)[-1]
    assert set(stored.by_crate) == {"core", "std", TOTAL}
    with pytest.raises(TypeError):
        stored.by_crate["std"] = {}  # type: ignore[index]

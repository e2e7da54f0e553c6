from __future__ import annotations

import json
from datetime import datetime

import pytest

from perf_history.enums import Kind
from perf_history.exceptions import MalformedInput, UnresolvableDate
from perf_history.parser import parse_document, run_name_from_filename
from perf_history.sources import SourceDocument

from .builders import crate_entry, document_text


def _doc(name: str, text: str) -> SourceDocument:
    return SourceDocument(name=name, text=text)


def test_run_name_extraction() -> None:
    assert run_name_from_filename("rustc--2016-08-06-21-59-30.json") == "rustc"
    assert run_name_from_filename("rust-encoding.0.2.32--2016-08-06-21-59-30.json") == "rust-encoding.0.2.32"


def test_run_name_requires_separator() -> None:
    with pytest.raises(MalformedInput):
        run_name_from_filename("rustc.json")


def test_parse_full_compiler_document() -> None:
    """
    < A `rustc` document becomes a full-compiler run with a synthetic total crate >
    1. Build a document with two crates and a commit-log header date.
    2. Parse it.
    3. Assert kind, commit, date (UTC) and crate keys.
    """
    # 1
    text = document_text(
        "abc123",
        [crate_entry("syntax", 10.0, phases={"parsing": 4.0}), crate_entry("std", 5.0, phases={"parsing": 1.0})],
        date="Mon Mar 14 08:32:45 2016 -0700",
    )

    # 2
    run = parse_document(_doc("rustc--2016-03-14-15-32-45.json", text))

    # 3
    assert run.kind is Kind.FULL_COMPILER
    assert run.commit == "abc123"
    assert run.date == datetime(2016, 3, 14, 15, 32, 45)
    assert set(run.by_crate) == {"syntax", "std", "total"}


def test_parse_benchmark_document_has_no_total_crate() -> None:
    text = document_text("abc123", [crate_entry("helloworld", 1.5, phases={"parsing": 0.5})], date="Sat Jan 2 13:58:57 2016 +0000")

    run = parse_document(_doc("helloworld--2016-01-02-13-58-57.json", text))

    assert run.kind is Kind.BENCHMARKS
    assert set(run.by_crate) == {"helloworld"}
    assert run.by_crate["helloworld"]["total"].time == 1.5


def test_parse_uses_configured_full_compiler_name() -> None:
    text = document_text("abc123", [crate_entry("cc1", 2.0)], date="Sat Jan 2 13:58:57 2016 +0000")

    run = parse_document(_doc("gcc--2016-01-02-13-58-57.json", text), full_compiler_name="gcc")

    assert run.kind is Kind.FULL_COMPILER
    assert "total" in run.by_crate


def test_header_date_falls_back_to_filename() -> None:
    """
    < An unusable or missing header date falls back to the filename date >
    1. Use a YYYY-MM-DD header date.
    2. Omit the header date entirely.
    3. Assert both runs are dated from the filename.
    """
    # 1
    plain = document_text("abc", [crate_entry("std", 1.0)], date="2016-05-05")
    run = parse_document(_doc("rustc--2016-08-06-21-59-30.json", plain))
    assert run.date == datetime(2016, 8, 6, 21, 59, 30)

    # 2
    missing = document_text("abc", [crate_entry("std", 1.0)])
    run = parse_document(_doc("rustc--2016-08-06-00-00.json", missing))

    # 3
    assert run.date == datetime(2016, 8, 6, 0, 0)


def test_unresolvable_date() -> None:
    text = document_text("abc", [crate_entry("std", 1.0)], date="yesterday")

    with pytest.raises(UnresolvableDate):
        parse_document(_doc("rustc--soon.json", text))


def test_unresolvable_date_is_malformed_input() -> None:
    assert issubclass(UnresolvableDate, MalformedInput)


@pytest.mark.parametrize(
    "text, reason",
    [
        ("", "empty"),
        ("   \n", "empty"),
        ("{not json", "invalid JSON"),
        (json.dumps({"header": {"commit": "abc"}, "times": []}), "no timing entries"),
        (json.dumps({"header": {"date": "Sat Jan 2 13:58:57 2016 +0000"}, "times": []}), "layout"),
        (json.dumps({"header": {"commit": "abc"}, "times": [{"crate": "std", "total": 1.0}]}), "layout"),
        (json.dumps([1, 2, 3]), "layout"),
    ],
)
def test_malformed_documents(text: str, reason: str) -> None:
    """
    < Malformed documents raise MalformedInput with a reason >
    1. Parse a malformed document.
    2. Assert MalformedInput is raised and the reason mentions the failure.
    """
    # 1
    with pytest.raises(MalformedInput) as exc_info:
        parse_document(_doc("rustc--2016-01-02-13-58-57.json", text))

    # 2
    assert reason in exc_info.value.reason
    assert exc_info.value.source == "rustc--2016-01-02-13-58-57.json"


def test_non_finite_times_are_rejected() -> None:
    text = '{"header": {"commit": "abc"}, "times": [{"crate": "std", "total": NaN, "times": {}}]}'

    with pytest.raises(MalformedInput):
        parse_document(_doc("rustc--2016-01-02-13-58-57.json", text))


def test_negative_memory_is_rejected() -> None:
    text = document_text("abc", [crate_entry("std", 1.0, phases={"parsing": 0.5}, rss={"parsing": -1})])

    with pytest.raises(MalformedInput):
        parse_document(_doc("rustc--2016-01-02-13-58-57.json", text))


@pytest.mark.parametrize(
    "entry",
    [
        crate_entry("std", -5.0),
        crate_entry("std", 5.0, phases={"parsing": -2.0}),
    ],
)
def test_negative_time_is_rejected(entry: dict) -> None:
    """
    < Negative crate or phase times make the document malformed >
    1. Build a document with a negative total or phase time.
    2. Assert MalformedInput is raised before any Run is built.
    """
    # 1
    text = document_text("abc", [entry], date="Sat Jan 2 13:58:57 2016 +0000")

    # 2
    with pytest.raises(MalformedInput) as exc_info:
        parse_document(_doc("rustc--2016-01-02-13-58-57.json", text))
    assert "layout" in exc_info.value.reason


def test_unknown_keys_are_ignored() -> None:
    payload = {
        "header": {"commit": "abc", "date": "Sat Jan 2 13:58:57 2016 +0000", "author": "someone"},
        "times": [{"crate": "std", "total": 1.0, "times": {}, "incremental": True}],
        "version": 2,
    }

    run = parse_document(_doc("rustc--2016-01-02-13-58-57.json", json.dumps(payload)))

    assert run.commit == "abc"

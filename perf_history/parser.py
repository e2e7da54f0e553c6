from __future__ import annotations

import json
import logging
from datetime import datetime

from pydantic import ValidationError

from perf_history.aggregator import make_times
from perf_history.dates import TEST_NAME_SEPARATOR, parse_filename_date, parse_header_date
from perf_history.enums import Kind
from perf_history.exceptions import MalformedInput, UnresolvableDate
from perf_history.run import Run
from perf_history.schemas import RawDocument, RawHeader
from perf_history.settings import DEFAULT_FULL_COMPILER_NAME
from perf_history.sources.base import SourceDocument

logger = logging.getLogger(__name__)


def run_name_from_filename(filename: str) -> str:
    """Return everything before the first `--`, e.g. `rust-encoding.0.2.32` for `rust-encoding.0.2.32--2016-08-06-21-59-30.json`."""
    idx = filename.find(TEST_NAME_SEPARATOR)
    if idx < 0:
        raise MalformedInput(filename, f"filename has no '{TEST_NAME_SEPARATOR}' separator")
    return filename[:idx]


def resolve_date(header: RawHeader, filename: str) -> datetime:
    """
    < Resolve the date of a run >
    1. Parse the header date with the commit-log layout, honouring its UTC offset.
    2. Otherwise parse the date embedded in the filename (with seconds, then without).
    3. Raise UnresolvableDate when both fail.
    """
    if header.date:
        try:
            return parse_header_date(header.date)
        except ValueError:
            logger.debug('Header date %r of %s is not a commit-log date', header.date, filename)

    try:
        return parse_filename_date(filename)
    except ValueError as e:
        raise UnresolvableDate(filename, f'no usable date in header or filename ({e})') from e


def parse_raw(document: SourceDocument) -> RawDocument:
    if not document.text.strip():
        raise MalformedInput(document.name, 'empty document')

    try:
        payload = json.loads(document.text)
    except json.JSONDecodeError as e:
        raise MalformedInput(document.name, f'invalid JSON: {e}') from e

    try:
        raw = RawDocument.model_validate(payload)
    except ValidationError as e:
        raise MalformedInput(document.name, f'unexpected document layout: {e.error_count()} error(s)') from e

    if not raw.times:
        raise MalformedInput(document.name, 'no timing entries')
    return raw


def parse_document(document: SourceDocument, *, full_compiler_name: str = DEFAULT_FULL_COMPILER_NAME) -> Run:
    """
    Parse one measurement document into a Run.

    Parameters
    ----------
    document:
        File name and raw text of the document.
    full_compiler_name:
        Test name that marks a full-compiler run. Any other test name is a benchmark.

    Raises
    ------
    MalformedInput
        Empty text, invalid JSON, unexpected layout, no timing entries, or a filename without `--`.
    UnresolvableDate
        Neither the header nor the filename yields a date.
    """
    raw = parse_raw(document)
    test_name = run_name_from_filename(document.name)
    date = resolve_date(raw.header, document.name)
    kind = Kind.from_test_name(test_name, full_compiler_name)

    run = Run(
        date=date,
        commit=raw.header.commit,
        kind=kind,
        by_crate=make_times(raw.times, kind is Kind.FULL_COMPILER),
    )
    logger.debug('Parsed %s: kind=%s commit=%s date=%s crates=%d', document.name, kind, run.commit, date, len(run.by_crate))
    return run

"""
< One load cycle: documents -> runs -> finalized RunStore >
1. Parse every document independently. Parsing has no shared state, so it may run on a thread pool.
2. Convert per-document failures (MalformedInput, UnresolvableDate) into counted skips.
3. Merge the parsed runs into a RunStoreBuilder sequentially, in document order.
4. Finalize. NoData and InternalInvariantViolation propagate to the caller; there is no partial result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from perf_history.enums import Kind
from perf_history.exceptions import MalformedInput
from perf_history.parser import parse_document
from perf_history.run import Run
from perf_history.settings import LoaderSettings
from perf_history.sources import AsyncDocumentSource, DirectorySource, DocumentSource, SourceDocument
from perf_history.store import RunStore, RunStoreBuilder

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    total: int = 0
    skipped: int = 0
    merged: int = 0
    full_compiler_runs: int = 0
    benchmark_runs: int = 0

    def log(self) -> None:
        logger.info('%d total files', self.total)
        logger.info('%d skipped files', self.skipped)
        logger.info('%d merged times', self.merged)
        logger.info('%d full-compiler times', self.full_compiler_runs)
        logger.info('%d benchmarks times', self.benchmark_runs)


@dataclass(frozen=True)
class LoadResult:
    store: RunStore
    report: LoadReport


def _parse_or_skip(document: SourceDocument, *, full_compiler_name: str) -> Run | None:
    try:
        return parse_document(document, full_compiler_name=full_compiler_name)
    except MalformedInput as e:
        logger.warning('Skipping %s: %s', document.name, e.reason)
        return None


class Loader:
    def __init__(self, settings: LoaderSettings | None = None) -> None:
        self.settings = settings or LoaderSettings()

    def _parse_all(self, documents: list[SourceDocument]) -> list[Run | None]:
        parse = partial(_parse_or_skip, full_compiler_name=self.settings.full_compiler_name)
        if self.settings.workers == 1 or len(documents) < 2:
            return [parse(doc) for doc in documents]

        with ThreadPoolExecutor(max_workers=self.settings.workers) as pool:
            return list(pool.map(parse, documents))

    def load(self, documents: Iterable[SourceDocument], *, read_errors: int = 0) -> LoadResult:
        """
        Build a RunStore from `documents`.

        Parameters
        ----------
        documents:
            Source documents. Merges of runs sharing a commit follow this order: later documents win.
        read_errors:
            Documents the source failed to read; counted as total and skipped.

        Raises
        ------
        NoData
            If no document produced a run.
        InternalInvariantViolation
            If a summary cannot be computed for the loaded time distribution.
        """
        docs = list(documents)
        report = LoadReport(total=len(docs) + read_errors, skipped=read_errors)

        builder = RunStoreBuilder()
        for doc, run in zip(docs, self._parse_all(docs)):
            if run is None:
                report.skipped += 1
                continue
            if builder.add(run, source=doc.name):
                report.merged += 1
            elif run.kind is Kind.FULL_COMPILER:
                report.full_compiler_runs += 1
            else:
                report.benchmark_runs += 1

        report.log()
        return LoadResult(store=builder.finalize(), report=report)

    def load_source(self, source: DocumentSource) -> LoadResult:
        docs = list(source.documents())
        return self.load(docs, read_errors=source.read_errors)

    def load_directory(self, path: str | Path | None = None) -> LoadResult:
        return self.load_source(DirectorySource(path if path is not None else self.settings.data_dir))

    async def load_async(self, source: AsyncDocumentSource) -> LoadResult:
        return self.load(await source.fetch())


def load_directory(path: str | Path | None = None, settings: LoaderSettings | None = None) -> LoadResult:
    return Loader(settings).load_directory(path)


async def load_sql(source: AsyncDocumentSource, settings: LoaderSettings | None = None) -> LoadResult:
    return await Loader(settings).load_async(source)

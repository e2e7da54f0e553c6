from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from perf_history.exceptions import NoData

from .base import SourceDocument

logger = logging.getLogger(__name__)


class DirectorySource:
    """
    Documents stored as files directly inside one directory.

    Files are yielded in file-name order so that merges of runs sharing a
    commit are reproducible. Subdirectories are ignored. Files that cannot be
    read are logged and counted in `read_errors` instead of aborting the load.
    """

    def __init__(self, path: str | Path, *, encoding: str = 'utf-8') -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.read_errors = 0

    def documents(self) -> Iterator[SourceDocument]:
        if not self.path.is_dir():
            raise NoData(f'Data directory not found: {self.path}')

        self.read_errors = 0
        for entry in sorted(self.path.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                continue
            try:
                text = entry.read_text(encoding=self.encoding)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning('Failed to read %s: %s', entry.name, e)
                self.read_errors += 1
                continue
            yield SourceDocument(name=entry.name, text=text)

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

DEFAULT_DATA_DIR: Final[str] = 'processed'
DEFAULT_FULL_COMPILER_NAME: Final[str] = 'rustc'
DEFAULT_WORKERS: Final[int] = 1


@dataclass(frozen=True)
class LoaderSettings:
    data_dir: str = DEFAULT_DATA_DIR
    full_compiler_name: str = DEFAULT_FULL_COMPILER_NAME
    workers: int = DEFAULT_WORKERS

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError('workers must be >= 1.')
        if not self.full_compiler_name:
            raise ValueError('full_compiler_name must not be empty.')

    @staticmethod
    def from_env() -> LoaderSettings:
        """
        < Load loader settings from environment variables >
        1. PERF_HISTORY_DATA_DIR: directory holding the documents. Defaults to `processed`.
        2. PERF_HISTORY_FULL_COMPILER: test name of full-compiler runs. Defaults to `rustc`.
        3. PERF_HISTORY_WORKERS: parser threads. Defaults to 1 (sequential).
        """
        data_dir = (os.getenv('PERF_HISTORY_DATA_DIR') or DEFAULT_DATA_DIR).strip()
        full_compiler_name = (os.getenv('PERF_HISTORY_FULL_COMPILER') or DEFAULT_FULL_COMPILER_NAME).strip()

        workers_raw = (os.getenv('PERF_HISTORY_WORKERS') or '').strip()
        try:
            workers = int(workers_raw) if workers_raw else DEFAULT_WORKERS
        except ValueError as e:
            raise ValueError(f'PERF_HISTORY_WORKERS must be an integer, got {workers_raw!r}.') from e

        return LoaderSettings(data_dir=data_dir, full_compiler_name=full_compiler_name, workers=workers)

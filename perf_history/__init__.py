from .enums import Edge, Kind
from .exceptions import *
from .loader import LoadReport, LoadResult, Loader, load_directory, load_sql
from .parser import parse_document
from .run import Run
from .schemas import MedianWindow, RunSchema, Summary, Timing
from .settings import LoaderSettings
from .snapshot import PerfHistoryService, SnapshotHolder
from .sources import DirectorySource, SourceDocument, SqlDocumentSource
from .store import RunStore, RunStoreBuilder

__all__ = [
    # enums
    'Edge',
    'Kind',
    # exceptions
    'PerfHistoryError',
    'MalformedInput',
    'UnresolvableDate',
    'NoData',
    'InternalInvariantViolation',
    # loader
    'Loader',
    'LoadReport',
    'LoadResult',
    'load_directory',
    'load_sql',
    # parser
    'parse_document',
    # run / schemas
    'Run',
    'Timing',
    'RunSchema',
    'MedianWindow',
    'Summary',
    # settings
    'LoaderSettings',
    # snapshot
    'SnapshotHolder',
    'PerfHistoryService',
    # sources
    'DirectorySource',
    'SourceDocument',
    'SqlDocumentSource',
    # store
    'RunStore',
    'RunStoreBuilder',
]


__version__ = '0.1.0'

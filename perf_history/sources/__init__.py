from .base import AsyncDocumentSource, DocumentSource, SessionProvider, SourceDocument
from .directory import DirectorySource
from .sql import DocumentBase, DocumentRecord, SqlDocumentSource

__all__ = [
    'AsyncDocumentSource',
    'DirectorySource',
    'DocumentBase',
    'DocumentRecord',
    'DocumentSource',
    'SessionProvider',
    'SourceDocument',
    'SqlDocumentSource',
]

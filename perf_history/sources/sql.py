from __future__ import annotations

import warnings

from sqlalchemy import String, Text, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .base import SessionProvider, SourceDocument


class DocumentBase(DeclarativeBase):
    pass


class DocumentRecord(DocumentBase):
    """One raw measurement document, keyed by the file name it was produced under."""

    __tablename__ = 'perf_documents'

    filename: Mapped[str] = mapped_column(String(255), primary_key=True)
    body: Mapped[str] = mapped_column(Text, default='')


class SqlDocumentSource:
    """
    Documents stored as rows of the `perf_documents` table.

    Session resolution
    ------------------
    - If a SessionProvider is configured on the class, it takes precedence.
    - Otherwise the session passed to `__init__` is used.
    - Rows are read in file-name order, like DirectorySource.
    """

    _session_provider: SessionProvider | None = None

    def __init__(self, session: AsyncSession | None = None, *, model: type[DocumentRecord] = DocumentRecord) -> None:
        self._specific_session = session
        self.model = model

        if session is not None and self._session_provider is not None:
            warnings.warn(
                '[SqlDocumentSource] A session was provided via __init__, but a SessionProvider is also '
                'configured. The SessionProvider takes precedence and the given session will be ignored.',
                stacklevel=2,
            )

    @classmethod
    def configure_session_provider(cls, provider: SessionProvider | None) -> None:
        cls._session_provider = provider

    @property
    def session(self) -> AsyncSession:
        if self._session_provider is None:
            if self._specific_session is None:
                raise RuntimeError('Neither SessionProvider nor specific_session is configured.')
            return self._specific_session

        return self._session_provider.get_session()

    async def fetch(self) -> list[SourceDocument]:
        stmt = select(self.model).order_by(self.model.filename)
        result = await self.session.execute(stmt)
        return [SourceDocument(name=row.filename, text=row.body or '') for row in result.scalars()]

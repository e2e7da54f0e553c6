from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class SourceDocument:
    """The raw text of one measurement document and the file name it was stored under."""

    name: str
    text: str


class DocumentSource(Protocol):
    # Documents that could not be read during the last documents() pass.
    read_errors: int

    def documents(self) -> Iterator[SourceDocument]: ...


class AsyncDocumentSource(Protocol):
    async def fetch(self) -> list[SourceDocument]: ...


class SessionProvider(Protocol):
    def get_session(self) -> AsyncSession: ...

class PerfHistoryError(Exception):
    """Base class for every error raised by perf_history."""


class MalformedInput(PerfHistoryError, ValueError):
    """A source document is empty, not JSON, or does not match the document schema."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f'{source}: {reason}')
        self.source = source
        self.reason = reason


class UnresolvableDate(MalformedInput):
    """Neither the header nor the filename of a document holds a parseable date."""


class NoData(PerfHistoryError, LookupError):
    """Nothing usable was loaded, or a query targeted a series without runs."""


class InternalInvariantViolation(PerfHistoryError, RuntimeError):
    """The time distribution of the input hit a case the summary cannot handle."""


__all__ = [
    'PerfHistoryError',
    'MalformedInput',
    'UnresolvableDate',
    'NoData',
    'InternalInvariantViolation',
]

from __future__ import annotations

from collections.abc import Awaitable, Callable

from perf_history.snapshot import PerfHistoryService, SnapshotHolder


def provide_history_service(
    holder: SnapshotHolder,
    service_type: type[PerfHistoryService] = PerfHistoryService,
) -> Callable[[], Awaitable[PerfHistoryService]]:
    """
    Create a dependency provider bound to a SnapshotHolder.

    Usage:
        holder = SnapshotHolder()
        holder.reload(lambda: load_directory('processed').store)
        app = Litestar(
            dependencies={
                "history": Provide(provide_history_service(holder)),
            }
        )
    """

    async def _provide_history_service() -> PerfHistoryService:
        return service_type(holder)

    return _provide_history_service

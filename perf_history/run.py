from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType

from perf_history.enums import Kind
from perf_history.history_types import ByCrate


@dataclass(eq=False, frozen=True)
class Run:
    """
    One execution's measurement record for one commit and date.

    Runs order by `date` only and compare equal on `(commit, date)`, so two runs
    with different commits on the same date are neither less nor greater than
    each other but still not equal.

    Fields cannot be reassigned. `frozen()` additionally makes `by_crate` read-only
    at both levels; a finalized RunStore only publishes frozen runs.
    """

    date: datetime
    commit: str
    kind: Kind
    by_crate: ByCrate = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Run):
            return NotImplemented
        return self.commit == other.commit and self.date == other.date

    def __hash__(self) -> int:
        return hash((self.commit, self.date))

    def __lt__(self, other: Run) -> bool:
        return self.date < other.date

    def __le__(self, other: Run) -> bool:
        return self.date <= other.date

    def __gt__(self, other: Run) -> bool:
        return self.date > other.date

    def __ge__(self, other: Run) -> bool:
        return self.date >= other.date

    def phase_names(self) -> set[str]:
        return {phase for phases in self.by_crate.values() for phase in phases}

    def frozen(self) -> Run:
        by_crate = {name: MappingProxyType(dict(phases)) for name, phases in self.by_crate.items()}
        return replace(self, by_crate=MappingProxyType(by_crate))

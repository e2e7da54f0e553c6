import sys
from collections.abc import Mapping
from datetime import datetime
from typing import TypeAlias

from pydantic import BaseModel

from perf_history.schemas import RunSchema, Timing

if sys.version_info >= (3, 13):
    from typing import TypeVar
else:
    from typing_extensions import TypeVar


CrateName: TypeAlias = str
PhaseName: TypeAlias = str

# crate -> phase -> Timing, the shape stored on every Run. Read-only once a store is finalized.
ByCrate: TypeAlias = Mapping[CrateName, Mapping[PhaseName, Timing]]

# crate -> phase -> float, used for medians and percent changes.
ByCrateValues: TypeAlias = dict[CrateName, dict[PhaseName, float]]

# Open-ended bound of a range query; None means "use the default for that edge".
OptionalDate: TypeAlias = datetime | None

TSchema = TypeVar('TSchema', bound=BaseModel, default=RunSchema)

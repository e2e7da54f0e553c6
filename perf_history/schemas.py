from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, NonNegativeInt

from perf_history.enums import Kind


# Raw input documents, one per execution.

Seconds = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class RawPhase(BaseModel):
    model_config = ConfigDict(extra='ignore')
    percent: FiniteFloat
    time: Seconds


class RawCrateEntry(BaseModel):
    model_config = ConfigDict(extra='ignore')
    crate: str
    total: Seconds
    times: dict[str, RawPhase]
    rss: dict[str, NonNegativeInt] | None = None


class RawHeader(BaseModel):
    model_config = ConfigDict(extra='ignore')
    commit: str
    date: str | None = None


class RawDocument(BaseModel):
    model_config = ConfigDict(extra='ignore')
    header: RawHeader
    times: list[RawCrateEntry]


# Normalized measurements.


class Timing(BaseModel):
    """One phase's measured share of a run. The phase name is the key it is stored under."""

    model_config = ConfigDict(frozen=True, from_attributes=True)
    percent: float
    time: float
    memory: NonNegativeInt | None = None


class RunSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    date: datetime
    commit: str
    kind: Kind
    by_crate: dict[str, dict[str, Timing]]


# Derived views.


class MedianWindow(BaseModel):
    """
    Per-crate, per-phase values labelled with a date.

    Holds median times when produced by the median window computer, and
    percent changes when produced by the summary engine.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)
    date: datetime
    by_crate: dict[str, dict[str, float]] = Field(default_factory=dict)


class Summary(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)
    total: MedianWindow
    weekly: list[MedianWindow]

"""Models for repeater options, per-tick context and status information."""

import math
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt, field_validator


### Custom Exceptions ###
class InvalidArgumentError(ValueError):
    """Raised when a repeater is created without a usable callback or options."""

    def __init__(self, msg: str | None = None) -> None:
        super().__init__(msg or "Invalid repeater argument.")


class InvalidOperationError(AttributeError):
    """Raised when trying to set the read-only abort flag of a signal."""

    def __init__(self) -> None:
        super().__init__("Cannot set aborted property. Use abort() instead.")


### Abort signal ###
class AbortSignal:
    """Read-only view on the abort state of a repeater."""

    __slots__ = ("_is_aborted",)

    def __init__(self, is_aborted: Callable[[], bool]) -> None:
        self._is_aborted = is_aborted

    @property
    def aborted(self) -> bool:
        return self._is_aborted()

    @aborted.setter
    def aborted(self, _value: bool) -> None:
        raise InvalidOperationError

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self.aborted})"


### Pydantic Models ###
class RepeaterOptions(BaseModel):
    """Repeater timing options. All durations are in milliseconds."""

    model_config = ConfigDict(frozen=True)

    interval: NonNegativeFloat = Field(default=0, description="Milliseconds between the end of a run and the next run")
    delay: NonNegativeFloat = Field(default=0, description="Milliseconds before the first run")
    context: Any = Field(default=None, description="Object the callback is bound to as its receiver")

    @field_validator("interval", "delay", mode="before")
    @classmethod
    def coerce_duration(cls, value: Any) -> float:
        """Fall back to 0 for anything that is not a real number and clamp negative durations to 0."""
        if isinstance(value, bool) or not isinstance(value, int | float) or math.isnan(value):
            return 0
        return max(value, 0)

    @classmethod
    def from_value(cls, options: "RepeaterOptions | Mapping[str, Any] | float") -> "RepeaterOptions":
        """Build options from a model, a mapping, or a bare interval number."""
        match options:
            case RepeaterOptions():
                return options
            case bool():
                pass
            case int() | float():
                return cls(interval=options)
            case Mapping():
                return cls.model_validate(dict(options))
        err_msg = f"Options must be a number or a mapping, got {type(options).__name__}"
        raise InvalidArgumentError(err_msg)


class TickContext(BaseModel):
    """Information passed to the callback on each run."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    count: NonNegativeInt = Field(description="1-based sequence number of this run")
    delta: NonNegativeFloat | None = Field(description="Milliseconds since the previous run started")
    signal: AbortSignal
    abort: Callable[[], Awaitable[None]] = Field(description="Abort the repeater without waiting for this run")


class RepeaterView(BaseModel):
    """API response model for repeater status."""

    id: str
    name: str
    interval_ms: NonNegativeFloat
    delay_ms: NonNegativeFloat
    tick_count: NonNegativeInt
    last_run_at: datetime | None = None
    running: bool
    aborted: bool

"""Models for recurring tasks started with the app."""

from collections.abc import Awaitable, Callable

from pydantic import BaseModel, Field, NonNegativeFloat


class RecurringTask(BaseModel):
    """Task that is repeated for the lifetime of the app."""

    name: str = Field(description="Task name used in logs and status responses")
    func: Callable[[], None] | Callable[[], Awaitable[None]] = Field(description="Sync or async task function")
    interval_s: NonNegativeFloat = Field(description="Seconds between the end of a run and the next run")
    delay_s: NonNegativeFloat = Field(default=0, description="Seconds before the first run")

"""Collection service that tracks live repeaters and aborts them together."""

import asyncio
from collections.abc import Iterator, Mapping
from typing import Any

from task_repeater.models.repeater import RepeaterOptions
from task_repeater.services.repeater import Repeater, RepeaterCallback


class RepeaterCollection:
    """Set of live repeaters. Repeaters leave the collection once they have aborted."""

    def __init__(self) -> None:
        self._repeaters: dict[str, Repeater] = {}

    def __len__(self) -> int:
        return len(self._repeaters)

    def __iter__(self) -> Iterator[Repeater]:
        return iter(list(self._repeaters.values()))

    def __contains__(self, repeater: object) -> bool:
        return isinstance(repeater, Repeater) and self._repeaters.get(repeater.id) is repeater

    def get(self, repeater_id: str) -> Repeater | None:
        return self._repeaters.get(repeater_id)

    def add(
        self,
        callback: RepeaterCallback | None = None,
        options: RepeaterOptions | Mapping[str, Any] | float | None = None,
        *,
        name: str | None = None,
    ) -> Repeater:
        """Create a new repeater and track it until it has aborted."""
        repeater = Repeater(callback, options, name=name)
        self._repeaters[repeater.id] = repeater
        repeater.once("aborted", lambda: self._repeaters.pop(repeater.id, None))
        return repeater

    async def abort(self) -> None:
        """Abort all current repeaters and wait for them to end."""
        repeaters = list(self._repeaters.values())
        await asyncio.gather(*(repeater.abort() for repeater in repeaters))

"""Simple task repetition utilities."""

import inspect
import logging
from collections.abc import Awaitable, Callable

from task_repeater.models.repeater import TickContext
from task_repeater.services.collection import RepeaterCollection
from task_repeater.services.repeater import Repeater

logger = logging.getLogger(__name__)


def repeat_task(
    task_func: Callable[[], None] | Callable[[], Awaitable[None]],
    seconds: float,
    task_name: str,
    *,
    delay_s: float = 0,
    collection: RepeaterCollection | None = None,
) -> Repeater:
    """Repeat a task every x seconds, logging each result."""

    async def run_task(context: TickContext) -> None:
        result = task_func()
        if inspect.isawaitable(result):
            await result
        logger.info("Task '%s' executed successfully (run %d)", task_name, context.count)

    options = {"interval": seconds * 1000, "delay": delay_s * 1000}
    if collection is not None:
        repeater = collection.add(run_task, options, name=task_name)
    else:
        repeater = Repeater(run_task, options, name=task_name)

    repeater.on("error", lambda e: logger.error("Exception in task '%s'", task_name, exc_info=e))
    return repeater

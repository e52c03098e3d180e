"""FastAPI application that runs recurring tasks on repeaters."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Callable, Sequence
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI

from task_repeater.__version__ import version
from task_repeater.api.dependencies.repeaters import repeater_collection
from task_repeater.api.routers.repeaters import router as repeaters_router
from task_repeater.core.config import settings
from task_repeater.models.tasks import RecurringTask
from task_repeater.utils.tasks import repeat_task

logger = logging.getLogger(__name__)


def build_lifespan(tasks: Sequence[RecurringTask]) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Create a lifespan handler that repeats the given tasks while the app is running."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001 # 'app' is expected by function signature
        # Start recurring tasks
        for task in tasks:
            repeat_task(
                task.func, task.interval_s, task.name, delay_s=task.delay_s, collection=repeater_collection
            )
        logger.info("Recurring tasks started: %d", len(tasks))

        yield

        # Abort all repeaters and wait for running tasks to finish
        try:
            await asyncio.wait_for(repeater_collection.abort(), timeout=settings.abort_timeout_s)
        except TimeoutError:
            logger.warning("Recurring tasks did not finish within %ss of shutdown", settings.abort_timeout_s)
        else:
            logger.info("Recurring tasks stopped")

    return lifespan


def create_app(tasks: Sequence[RecurringTask] = ()) -> FastAPI:
    """Create the FastAPI app with repeater status endpoints."""
    app = FastAPI(
        lifespan=build_lifespan(tasks),
        version=version,
        title="Task Repeater API",
        description="API for inspecting and aborting recurring tasks",
    )
    app.include_router(repeaters_router)
    return app

"""Router for repeater status and abort endpoints."""

from fastapi import APIRouter

from task_repeater.api.dependencies.repeaters import RepeaterCollectionDependency, RepeaterDependency
from task_repeater.core.config import settings
from task_repeater.models.repeater import RepeaterView

router = APIRouter(prefix=settings.api_prefix, tags=["repeaters"])


@router.get("", summary="List live repeaters")
async def list_repeaters(collection: RepeaterCollectionDependency) -> list[RepeaterView]:
    """Get status of all repeaters that have not aborted yet."""
    return [repeater.get_status() for repeater in collection]


@router.get("/{repeater_id}")
async def get_repeater_status(repeater: RepeaterDependency) -> RepeaterView:
    """Get repeater status."""
    return repeater.get_status()


@router.delete("/{repeater_id}", status_code=204, summary="Abort a repeater")
async def abort_repeater(repeater: RepeaterDependency) -> None:
    """Abort a repeater and wait for its current run to finish."""
    await repeater.abort()


@router.delete("", status_code=204, summary="Abort all repeaters")
async def abort_all_repeaters(collection: RepeaterCollectionDependency) -> None:
    """Abort all repeaters and wait for their current runs to finish."""
    await collection.abort()

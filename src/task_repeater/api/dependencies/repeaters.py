"""Repeater collection dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, HTTPException

from task_repeater.services.collection import RepeaterCollection
from task_repeater.services.repeater import Repeater

repeater_collection = RepeaterCollection()


def get_repeater_collection() -> RepeaterCollection:
    """Fetch the repeater collection singleton."""
    return repeater_collection


RepeaterCollectionDependency = Annotated[RepeaterCollection, Depends(get_repeater_collection)]


def get_repeater(repeater_id: str, collection: RepeaterCollectionDependency) -> Repeater:
    """Fetch a live repeater by ID."""
    if (repeater := collection.get(repeater_id)) is None:
        raise HTTPException(status_code=404, detail=f"Repeater with ID {repeater_id} not found")
    return repeater


RepeaterDependency = Annotated[Repeater, Depends(get_repeater)]

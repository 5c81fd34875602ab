"""Recipe instance endpoints for the dashboard."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from core.exceptions import BakeryNotFoundError
from dependencies.bakery import Bakery
from schemas.api import ApiResponse
from schemas.bakery import (
    FireEventRequest,
    Instance,
    ServiceInformation,
    ServiceResult,
)


router = APIRouter(prefix="/instances", tags=["instances"])


def _unconfirmed(action: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"{action} was not confirmed by the backend",
    )


@router.post(
    "/{instance_id}/bake/{recipe_id}",
    response_model=ApiResponse[str],
    status_code=status.HTTP_201_CREATED,
    summary="Bake a new recipe instance",
)
async def bake(instance_id: str, recipe_id: str, bakery: Bakery) -> ApiResponse[str]:
    visual = await bakery.post_bake(instance_id, recipe_id)
    if visual is None:
        raise _unconfirmed(f"Baking instance {instance_id}")
    return ApiResponse(data=visual, message="Instance baked")


@router.get(
    "/{instance_id}",
    response_model=ApiResponse[Instance],
    summary="Get instance state",
    responses={404: {"description": "Instance not found"}},
)
async def get_instance(instance_id: str, bakery: Bakery) -> ApiResponse[Instance]:
    instance = await bakery.get_instance(instance_id)
    if instance is None:
        raise BakeryNotFoundError(f"Instance {instance_id} not found")
    return ApiResponse(data=instance, message="Instance retrieved")


@router.delete(
    "/{instance_id}",
    response_model=ApiResponse[str],
    summary="Delete an instance and remove it from the index",
)
async def delete_instance(instance_id: str, bakery: Bakery) -> ApiResponse[str]:
    confirmation = await bakery.delete_instance(instance_id)
    if confirmation is None:
        raise _unconfirmed(f"Deleting instance {instance_id}")
    return ApiResponse(data=confirmation, message="Instance deleted")


@router.get(
    "/{instance_id}/visual",
    response_model=ApiResponse[str],
    summary="Get the instance graph in dot format",
    responses={404: {"description": "Instance not found"}},
)
async def get_instance_visual(instance_id: str, bakery: Bakery) -> ApiResponse[str]:
    visual = await bakery.get_instance_visual(instance_id)
    if visual is None:
        raise BakeryNotFoundError(f"Instance {instance_id} not found")
    return ApiResponse(data=visual, message="Instance visual retrieved")


@router.post(
    "/{instance_id}/fire-event",
    response_model=ApiResponse[ServiceResult],
    summary="Fire a sensory event and wait for completion",
)
async def fire_event(
    instance_id: str, request: FireEventRequest, bakery: Bakery
) -> ApiResponse[ServiceResult]:
    result = await bakery.fire_event(
        instance_id, request.name, request.provided_ingredients
    )
    message = (
        "Event fired"
        if isinstance(result, ServiceInformation)
        else "Fire event request failed"
    )
    return ApiResponse(data=result, message=message)

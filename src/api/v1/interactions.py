"""Interaction endpoints for the dashboard."""

from __future__ import annotations

from fastapi import APIRouter

from dependencies.bakery import Bakery
from schemas.api import ApiResponse
from schemas.bakery import (
    ExecuteInteractionRequest,
    Interaction,
    ServiceInformation,
    ServiceResult,
)


router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.get(
    "",
    response_model=ApiResponse[list[Interaction]],
    summary="List interactions",
)
async def list_interactions(bakery: Bakery) -> ApiResponse[list[Interaction]]:
    interactions = await bakery.get_interactions()
    return ApiResponse(data=interactions, message=f"{len(interactions)} interactions")


@router.post(
    "/execute",
    response_model=ApiResponse[ServiceResult],
    summary="Execute an interaction",
    description=(
        "Executes a single interaction and returns a timed envelope. The "
        "envelope's `kind` is `information` when the backend answered (its "
        "`outcome` may still be a failure) and `error` when the call itself "
        "failed, timed out or was cancelled."
    ),
)
async def execute_interaction(
    request: ExecuteInteractionRequest, bakery: Bakery
) -> ApiResponse[ServiceResult]:
    result = await bakery.execute_interaction(request.id, request.ingredients)
    message = (
        "Interaction executed"
        if isinstance(result, ServiceInformation)
        else "Interaction request failed"
    )
    return ApiResponse(data=result, message=message)

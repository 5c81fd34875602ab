"""Recipe endpoints for the dashboard.

Thin adapters over BakeryService: retrieval degradation is decided by the
service, the routes only turn a missing record into a 404.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from core.exceptions import BakeryNotFoundError
from dependencies.bakery import Bakery
from schemas.api import ApiResponse
from schemas.bakery import Recipe, RecipeBody


router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get(
    "",
    response_model=ApiResponse[list[Recipe]],
    summary="List recipes",
)
async def list_recipes(bakery: Bakery) -> ApiResponse[list[Recipe]]:
    recipes = await bakery.get_recipes()
    return ApiResponse(data=recipes, message=f"{len(recipes)} recipes")


@router.get(
    "/{recipe_id}",
    response_model=ApiResponse[RecipeBody],
    summary="Get recipe detail",
    responses={404: {"description": "Recipe not found"}},
)
async def get_recipe(recipe_id: str, bakery: Bakery) -> ApiResponse[RecipeBody]:
    recipe = await bakery.get_recipe(recipe_id)
    if recipe is None:
        raise BakeryNotFoundError(f"Recipe {recipe_id} not found")
    return ApiResponse(data=recipe, message="Recipe retrieved")


@router.get(
    "/{recipe_id}/visual",
    response_model=ApiResponse[str],
    summary="Get the recipe graph in dot format",
    responses={404: {"description": "Recipe not found"}},
)
async def get_recipe_visual(recipe_id: str, bakery: Bakery) -> ApiResponse[str]:
    visual = await bakery.get_recipe_visual(recipe_id)
    if visual is None:
        raise BakeryNotFoundError(f"Recipe {recipe_id} not found")
    return ApiResponse(data=visual, message="Recipe visual retrieved")


@router.delete(
    "/{recipe_id}",
    response_model=ApiResponse[str],
    summary="Deactivate a recipe",
    responses={502: {"description": "Backend did not confirm the deactivation"}},
)
async def deactivate_recipe(recipe_id: str, bakery: Bakery) -> ApiResponse[str]:
    confirmation = await bakery.deactivate_recipe(recipe_id)
    if confirmation is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Deactivation of recipe {recipe_id} was not confirmed",
        )
    return ApiResponse(data=confirmation, message="Recipe deactivated")

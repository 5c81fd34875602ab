from fastapi import APIRouter

from .health import router as health_router
from .instances import router as instances_router
from .interactions import router as interactions_router
from .recipes import router as recipes_router


api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(recipes_router)
api_router.include_router(interactions_router)
api_router.include_router(instances_router)

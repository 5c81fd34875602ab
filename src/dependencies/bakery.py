"""Bakery service dependency.

The application lifespan (see `main.py`) owns one `httpx.AsyncClient` and one
`BakeryService` for the whole process; requests borrow them from app state.
"""

from __future__ import annotations

from typing import Annotated, cast

from fastapi import Depends, Request

from services.bakery import BakeryService


def get_bakery_service(request: Request) -> BakeryService:
    """FastAPI dependency returning the process-wide BakeryService."""
    return cast(BakeryService, request.app.state.bakery_service)


Bakery = Annotated[BakeryService, Depends(get_bakery_service)]

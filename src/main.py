from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.v1.api import api_router
from core.config import get_settings
from core.error_handler import (
    ExceptionNormalizationMiddleware,
    global_exception_handler,
    setup_logging,
)
from core.exceptions import DomainError
from core.middleware import CorrelationIdMiddleware
from services.bakery import BakeryService


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own one connection pool to the baker backend for the process lifetime."""
    settings = get_settings()
    async with httpx.AsyncClient(
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        headers={"Accept": "application/json"},
    ) as client:
        app.state.bakery_service = BakeryService.from_settings(client, settings)
        yield


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Dashboard facade over the baker recipe engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(ExceptionNormalizationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it runs first and every log line carries the ID
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(StarletteHTTPException, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)
    app.add_exception_handler(DomainError, global_exception_handler)

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

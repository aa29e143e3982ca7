"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app_builder.api.v1.router import api_v1_router
from app_builder.api.viewer import router as viewer_router
from app_builder.core.config import settings
from app_builder.core.dependencies import close_session_registry
from app_builder.core.exceptions import (
    ProblemDetailError,
    http_exception_handler,
    problem_detail_handler,
    validation_exception_handler,
)
from app_builder.core.middleware.cors import get_cors_config
from app_builder.core.middleware.request_id import RequestIdMiddleware
from app_builder.db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting App Builder API (environment=%s, state=%s, publish=%s)",
        settings.ENVIRONMENT,
        settings.STATE_BACKEND,
        settings.PUBLISH_MODE,
    )
    yield
    logger.info("Shutting down: flushing pending builder saves")
    await close_session_registry()
    await engine.dispose()


app = FastAPI(
    title="App Builder API",
    version="0.1.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Middleware (last added = first executed)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(CORSMiddleware, **get_cors_config())

# Exception handlers (RFC 7807)
app.add_exception_handler(ProblemDetailError, problem_detail_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Routes
app.include_router(api_v1_router, prefix="/api/v1")
app.include_router(viewer_router, tags=["viewer"])

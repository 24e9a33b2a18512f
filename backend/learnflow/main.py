"""FastAPI application entry point.

This module wires together the API routers, configures middleware and
startup tasks, and exposes the ASGI application object used by the
server.
"""

import os
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from learnflow.routes import (
    auth,
    users,
    quizzes,
    progress,
    leaderboard,
    badges,
    admin,
)
from learnflow.database import create_db_and_tables, async_session
from learnflow.crud import ensure_quiz_content
from learnflow.errors import LearnFlowError

# The log level can be controlled with an environment variable so
# deployments can adjust verbosity without code changes.
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL))
logger = logging.getLogger(__name__)

SEED_QUIZZES = os.getenv("SEED_QUIZZES", "true").lower() == "true"

app = FastAPI(title="LearnFlow", docs_url=None)


def custom_openapi():
    """Generate an OpenAPI schema that is aware of our `/api` proxy prefix."""

    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    # The reverse proxy serves the API under `/api`.
    openapi_schema["servers"] = [{"url": "/api"}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    """Create tables and load the built-in quizzes on a fresh database."""

    await create_db_and_tables()
    if SEED_QUIZZES:
        async with async_session() as session:
            await ensure_quiz_content(session)


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(quizzes.router)
app.include_router(progress.router)
app.include_router(leaderboard.router)
app.include_router(badges.router)
app.include_router(admin.router)


@app.get("/docs", include_in_schema=False)
async def custom_swagger_ui_html():
    """Serve the interactive docs with the correct API prefix."""

    return get_swagger_ui_html(openapi_url="/api/openapi.json", title="API Docs")


@app.get("/")
async def read_root():
    return {"message": "Welcome to LearnFlow API"}


@app.exception_handler(LearnFlowError)
async def learnflow_error_handler(request: Request, exc: LearnFlowError):
    if exc.status_code >= 500:
        logger.error("Request %s failed: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "message": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler that logs the stack trace once."""
    logger.exception("Unhandled error during request %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "code": "internal_server_error",
            "message": "An unexpected error occurred",
        },
    )

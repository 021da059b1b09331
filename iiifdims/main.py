"""Main FastAPI application."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from iiifdims.config import config
from iiifdims.database import AsyncSessionLocal, init_db
from iiifdims.logging_config import configure_logging
from iiifdims.utils.auth import ensure_initial_admin

logger = logging.getLogger("iiifdims")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Apply migrations and seed the admin account on startup."""
    await init_db()
    async with AsyncSessionLocal() as session:
        admin = await ensure_initial_admin(session)
    if admin is not None:
        logger.info("Created initial admin %s", admin.email)
    yield


configure_logging(debug=config.DEBUG)


app = FastAPI(
    title="iiifdims",
    description="Copies IIIF image dimensions onto media entities",
    version="0.1.0",
    lifespan=lifespan,
)


access_logger = logging.getLogger("iiifdims.access")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log one line per request."""

    response = await call_next(request)
    client_host = "-"
    if request.client is not None:
        client_host = request.client.host or "-"

    access_logger.info(
        '%s - "%s %s" %s',
        client_host,
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


from iiifdims.routes import actions, auth  # noqa: E402

app.include_router(auth.router)
app.include_router(actions.router)

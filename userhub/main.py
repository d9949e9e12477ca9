"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userhub.api.v1 import router as v1_router
from userhub.core.config import APP_VERSION, settings
from userhub.core.database import SessionLocal, engine
from userhub.core.errors import AppError
from userhub.models import Base
from userhub.repositories.users import SqlUserStore
from userhub.schemas.common import ErrorResponse
from userhub.services.users import ensure_superadmin

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

HTTP_ERROR_LABELS = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Unprocessable Entity",
    429: "Too Many Requests",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # SQLite is only used for local runs and tests; Postgres is migrated with alembic.
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_superadmin(SqlUserStore(db), settings)
    finally:
        db.close()
    logger.info("UserHub API started", extra={"env": settings.APP_ENV, "version": APP_VERSION})
    yield


app = FastAPI(
    title="UserHub API",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str | list[str], error: str | None = None) -> JSONResponse:
    """Render the uniform error body {message, error, statusCode}."""
    body = ErrorResponse(
        message=message,
        error=error or HTTP_ERROR_LABELS.get(status_code, "Error"),
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message, exc.error)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Payload validation failures are reported as 400 with one message per failed field."""
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        text = err.get("msg", "Invalid value")
        messages.append(f"{field}: {text}" if field else text)
    return error_response(400, messages)


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "UserHub API"}

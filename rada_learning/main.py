"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from rada_learning.config import configure_logging, get_settings
from rada_learning.database import DatabaseSession, dispose_engine, initialize_database
from rada_learning.domain.common.exceptions import DomainError
from rada_learning.exceptions import RadaError
from rada_learning.infrastructure.common.schemas import ErrorResponse, HealthResponse
from rada_learning.infrastructure.learning.routers import content, events, learners, quiz_attempts

settings = get_settings()
logger = structlog.get_logger(__name__)

# Domain error code -> HTTP status
DOMAIN_ERROR_STATUS: dict[str, int] = {
    "validation_error": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "configuration_error": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "not_found": status.HTTP_404_NOT_FOUND,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "attempt_locked": status.HTTP_409_CONFLICT,
    "capacity_exceeded": status.HTTP_409_CONFLICT,
    "challenge_not_active": status.HTTP_409_CONFLICT,
    "late_submission": status.HTTP_409_CONFLICT,
    "business_rule_violation": status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.ENVIRONMENT)
    initialize_database(settings)
    logger.info("application_started", environment=settings.ENVIRONMENT)
    yield
    dispose_engine()
    logger.info("application_stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, code: str, message: str, details: dict) -> JSONResponse:
    body = ErrorResponse(error=code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = DOMAIN_ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
    logger.info(
        "domain_error",
        code=exc.code,
        path=request.url.path,
        status_code=status_code,
        error_message=exc.message,
    )
    return _error_response(status_code, exc.code, exc.message, exc.details)


@app.exception_handler(RadaError)
async def rada_error_handler(request: Request, exc: RadaError) -> JSONResponse:
    logger.warning(
        "service_error",
        code=exc.code,
        path=request.url.path,
        status_code=exc.status_code,
        error_message=exc.message,
    )
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        "validation_error",
        "Request body or parameters are invalid",
        {"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
    )


app.include_router(events.router, prefix=settings.API_V1_PREFIX)
app.include_router(learners.router, prefix=settings.API_V1_PREFIX)
app.include_router(quiz_attempts.router, prefix=settings.API_V1_PREFIX)
app.include_router(content.router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}


@app.get("/health", response_model=HealthResponse)
def health(db: DatabaseSession) -> HealthResponse:
    """Health check. Reports the database as unavailable instead of failing."""
    try:
        db.execute(text("SELECT 1"))
        return HealthResponse(status="healthy", database="connected")
    except Exception as e:
        logger.warning("health_check_database_failed", error=str(e))
        return HealthResponse(status="degraded", database="unavailable")


@app.get(f"{settings.API_V1_PREFIX}/")
def api_root() -> dict[str, str]:
    return {
        "message": f"{settings.PROJECT_NAME} v1",
        "version": settings.VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }

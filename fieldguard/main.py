from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from fieldguard.core.config import settings
from fieldguard.core.logging import get_logger, setup_logging
from fieldguard.routers import validate as validate_router
from fieldguard.core.errors import (
    FieldGuardException,
    fieldguard_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("DEBUG" if settings.APP_ENV == "development" else settings.LOG_LEVEL)
    logger = get_logger("startup")
    logger.info("Application starting", env=settings.APP_ENV)
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="FieldGuard API",
    description=(
        "**Request-data field validation**\n\n"
        "Checks a data object against required / optional dot paths and a "
        "declarative schema, and reports normalized field errors.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(FieldGuardException, fieldguard_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(validate_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """Returns `{"status": "ok"}` when the API is up. Used for liveness probes."""
    return {"status": "ok", "env": settings.APP_ENV}

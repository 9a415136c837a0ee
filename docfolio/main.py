"""Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import __version__
from .api import documents_router, folders_router, users_router
from .core.config import ConfigurationError, settings
from .core.logging_config import redact, setup_logging
from .database import DATABASE_URL, Base, SessionLocal, engine, get_db, is_postgresql
from .exceptions import DocfolioException
from . import models  # noqa: F401  (registers tables on Base.metadata)
from .middleware.exception_handler import (
    database_exception_handler,
    docfolio_exception_handler,
    validation_exception_handler,
)
from .middleware.request_context import RequestContextMiddleware

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


def _validate_database_connection() -> None:
    """Test that the database is reachable. Exits with a clear message on failure."""
    masked = redact(DATABASE_URL)
    logger.info(f"Connecting to database: {masked}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
    except Exception as e:
        error_str = redact(str(e))

        if is_postgresql():
            if "could not connect" in error_str or "Connection refused" in error_str:
                hint = "Verify PostgreSQL is running and DATABASE_URL points at it"
            elif "authentication failed" in error_str:
                hint = "Check username and password in DATABASE_URL"
            elif "does not exist" in error_str:
                hint = "Create the database: createdb <database_name>"
            else:
                hint = "Check DATABASE_URL in .env or environment variables"
        else:
            hint = "Check that the directory exists and is writable"

        logger.critical(
            "Database connection failed.\n"
            f"  DATABASE_URL: {masked}\n"
            f"  Fix: {hint}\n"
            f"  Error: {error_str}"
        )
        raise SystemExit(1)


_validate_database_connection()
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the Docfolio API."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if settings.seed_on_startup:
        from .core.seeder import seed_demo_data
        db = SessionLocal()
        try:
            seeded = seed_demo_data(db)
            if seeded > 0:
                logger.info(f"First startup: seeded {seeded} documents")
        except DocfolioException as e:
            logger.warning(f"Seeding failed (non-fatal): {e.message}")
        except SQLAlchemyError as e:
            logger.warning(f"Seeding failed (non-fatal): {e}")
        finally:
            db.close()

    yield


app = FastAPI(
    title="Docfolio API",
    description=(
        "REST API for a per-user library of document records and folders. "
        "Provides CRUD for users, documents and folders, duplicate-name checks, "
        "and a combined folders-and-documents feed with search and pagination."
    ),
    version=__version__,
    lifespan=lifespan,
)

# Middleware stack (outermost first: CORS wraps request context).
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "X-Request-ID"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(DocfolioException, docfolio_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)

logger.info(
    "Docfolio API started | env=%s | db=%s | cors=%s",
    settings.environment.value,
    "PostgreSQL" if is_postgresql() else "SQLite",
    ",".join(settings.get_cors_origins()),
)

app.include_router(users_router)
app.include_router(documents_router)
app.include_router(folders_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "Docfolio API",
        "version": __version__,
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Database status, uptime and row counts.

    Never raises; a database failure is reported as ``degraded`` so load
    balancers can still probe without receiving 5xx.
    """
    db_status = "ok"
    counts = {"users": 0, "documents": 0, "folders": 0}
    try:
        for table in counts:
            counts[table] = db.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar() or 0
    except SQLAlchemyError:
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": __version__,
        "user_count": counts["users"],
        "document_count": counts["documents"],
        "folder_count": counts["folders"],
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("docfolio.main:app", host="0.0.0.0", port=8000)

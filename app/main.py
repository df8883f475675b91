"""
Leave Tracking Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from app.api.router import api_router
from app.core.config import settings
from app.core.errors import (
    http_exception_handler,
    domain_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from app.core.exceptions import DomainError
from app.core.logging import setup_logging
from app.core.security import hash_password
from app.db.session import SessionLocal
from app.models.employee import Employee, Role, Department
from app.repositories.sql import SqlAlchemyUnitOfWork
from app.services import balance_ledger as ledger
from app.utils.datetime_utils import now_utc

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return "***"
    if parsed.scheme.startswith("sqlite"):
        return url  # Safe to log path
    if parsed.password:
        netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
        if parsed.port:
            netloc += f":{parsed.port}"
        return urlunparse(parsed._replace(netloc=netloc))
    return url


# Create FastAPI app
app = FastAPI(
    title="Leave Tracking Backend",
    description="Leave requests, department approvals and PTO/LWOP balances",
    version=settings.VERSION or "1.0.0"
)

# Configure CORS - must be before other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(DomainError, domain_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api/v1
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_log_config() -> None:
    """Log DATABASE_URL at startup so it can be verified against Alembic."""
    masked = _mask_database_url(settings.DATABASE_URL)
    logger.info("DATABASE_URL (app): %s", masked)


@app.on_event("startup")
def bootstrap_initial_admin() -> None:
    """
    Create the initial admin user (with a PTO balance) if no admin exists.
    This ensures the system always has someone who can assign approvers.
    """
    db = SessionLocal()
    try:
        admin_exists = db.query(Employee).filter(
            (Employee.emp_code == settings.INITIAL_ADMIN_EMP_CODE) |
            (Employee.role == Role.ADMIN)
        ).first()
        if admin_exists:
            logger.info("Admin user already exists, skipping initial bootstrap")
            return

        logger.info("No admin user found, creating initial admin...")
        uow = SqlAlchemyUnitOfWork(db)
        with uow:
            initial_admin = Employee(
                emp_code=settings.INITIAL_ADMIN_EMP_CODE,
                email=settings.INITIAL_ADMIN_EMAIL.lower(),
                name="System Administrator",
                position="Administrator",
                department=Department.HUMAN_RESOURCES,
                role=Role.ADMIN,
                password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
                active=True,
            )
            uow.employees.add(initial_admin)
            ledger.initialize_balance(uow, initial_admin.id, now_utc().year, settings.DEFAULT_PTO_CREDITS)
            uow.commit()

        logger.info("Initial admin user created: emp_code=%s", settings.INITIAL_ADMIN_EMP_CODE)
        logger.info("Password: [set via INITIAL_ADMIN_PASSWORD environment variable]")
    except OperationalError as e:
        # Database not ready yet (tables might not exist)
        if "no such table" in str(e).lower() or "does not exist" in str(e).lower():
            logger.warning("Database tables not ready yet, skipping initial bootstrap. Run alembic upgrade head")
        else:
            logger.error("Database error during admin bootstrap: %s", e)
    finally:
        db.close()


async def _handle_operational_error(request, exc: OperationalError):
    msg = str(exc).lower()
    if "no such table" in msg or "does not exist" in msg:
        return JSONResponse(
            status_code=500,
            content={"detail": "Run alembic upgrade head"},
        )
    return await generic_exception_handler(request, exc)


app.add_exception_handler(OperationalError, _handle_operational_error)

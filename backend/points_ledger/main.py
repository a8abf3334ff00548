"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from points_ledger.config import settings
from points_ledger.database import Base, engine
from points_ledger.errors import LedgerError, ValidationError

# Import routers
from points_ledger.routers import employees, points, rewards

# Import all models so Base.metadata knows about them
import points_ledger.models  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Shift Points Ledger",
    description="Points ledger & recognition — awards, undo, redemptions and leaderboards for multi-location retail teams",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
def ledger_error_handler(request: Request, exc: LedgerError):
    """Each domain error kind maps to its own status code and error tag."""
    logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.error_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.error_code},
    )


@app.exception_handler(RequestValidationError)
def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies share the ValidationError shape and status."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return ledger_error_handler(request, ValidationError(problems))


# Register routers
app.include_router(points.router, prefix="/api/points", tags=["Points"])
app.include_router(employees.router, prefix="/api/employees", tags=["Employees"])
app.include_router(rewards.router, prefix="/api/rewards", tags=["Rewards"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}

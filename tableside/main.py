"""
Tableside - Main Application Entry Point
Restaurant table ordering and floor-plan management
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlmodel import Session
import structlog

from tableside import __version__
from tableside.core.config import get_settings
from tableside.core.database import engine, init_db
from tableside.core.events import event_bus
from tableside.core.exceptions import (
    ConflictError, InvalidTransitionError, InvariantViolationError, NotFoundError,
    PositionError, TablesideError, ValidationError
)
from tableside.api import admin, floor_plans, menu_items, orders, tables
from tableside.services.storage import Storage
from tableside.services.table_views import occupancy_board

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger(__name__)
settings = get_settings()

# Most specific first; the first isinstance match wins
ERROR_STATUS_CODES = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PositionError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (InvariantViolationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_code_for(error: TablesideError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Initializing {settings.APP_NAME} backend")
    init_db()

    with Session(engine) as session:
        try:
            occupancy_board.seed_orders(Storage(session).list_open_orders())
        except InvariantViolationError as e:
            logger.error(
                f"Occupancy board starts empty: {e.detail}",
                order_ids=[str(order_id) for order_id in e.order_ids],
            )
    occupancy_board.attach(event_bus)

    yield

    # Shutdown
    occupancy_board.detach(event_bus)
    logger.info(f"Shutting down {settings.APP_NAME} backend")


# Create FastAPI application
app = FastAPI(
    title="Tableside API",
    description="Table ordering, order lifecycle and floor-plan management for restaurants",
    version=__version__,
    lifespan=lifespan,
)

# Configure middleware stack
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TablesideError)
async def tableside_error_handler(request: Request, exc: TablesideError):
    """Translate core errors into JSON responses"""
    status_code = status_code_for(exc)
    if isinstance(exc, InvariantViolationError):
        logger.error(
            f"Invariant violation on {request.method} {request.url.path}: {exc.detail}",
            order_ids=[str(order_id) for order_id in exc.order_ids],
        )
    else:
        logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Include routers
prefix = settings.API_V1_PREFIX
app.include_router(orders.router, prefix=f"{prefix}/orders", tags=["orders"])
app.include_router(tables.router, prefix=f"{prefix}/tables", tags=["tables"])
app.include_router(floor_plans.router, prefix=f"{prefix}/floor-plans", tags=["floor-plans"])
app.include_router(menu_items.router, prefix=f"{prefix}/menu-items", tags=["menu-items"])
app.include_router(admin.router, prefix=f"{prefix}/admin", tags=["admin"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "tableside-api"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Tableside API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tableside.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )

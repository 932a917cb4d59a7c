"""
GestIA - Main Application Entry Point
Multi-tenant business management: customers, calendar, team and inbox
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import structlog

from gestia import __version__
from gestia.core.config import get_settings
from gestia.core.errors import GestiaError, gestia_error_handler
from gestia.core.events import ViewsInvalidated, event_bus
from gestia.core.logging import configure_logging
from gestia.api import auth, calendar, customers, employees, inbox

configure_logging()

logger = structlog.get_logger(__name__)
settings = get_settings()


def log_invalidated_views(event: ViewsInvalidated) -> None:
    logger.info("views_invalidated", **event.to_dict())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Initializing GestIA backend", environment=settings.ENVIRONMENT)
    # Tables are created by Alembic migrations, not auto-generated
    event_bus.subscribe(ViewsInvalidated.__name__, log_invalidated_views)

    yield

    # Shutdown
    event_bus.unsubscribe(ViewsInvalidated.__name__, log_invalidated_views)
    logger.info("Shutting down GestIA backend")


# Create FastAPI application
app = FastAPI(
    title="GestIA API",
    description="Multi-tenant management for small service businesses",
    version=__version__,
    lifespan=lifespan,
)

app.add_exception_handler(GestiaError, gestia_error_handler)

# Configure middleware stack
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After"],
)

# Include routers
prefix = settings.API_V1_PREFIX
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
app.include_router(customers.router, prefix=f"{prefix}/customers", tags=["customers"])
app.include_router(calendar.router, prefix=f"{prefix}/appointments", tags=["appointments"])
app.include_router(employees.router, prefix=f"{prefix}/employees", tags=["employees"])
app.include_router(inbox.router, prefix=f"{prefix}/inbox", tags=["inbox"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "gestia-api"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "GestIA API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gestia.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )

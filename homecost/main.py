"""
HomeCost - Mortgage Estimate Service

Main FastAPI application entry point. Configures routes and application
lifecycle events.

Version: 1.0.0
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
# Import logging configuration (initializes logging)
from homecost.logging_config import get_logger
from homecost.config import settings

# Import route modules
from homecost.routes import auth
from homecost.routes import profile
from homecost.routes import calculations

# Get logger for this module
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.

    Handles startup and shutdown events for the application.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("HomeCost Application Starting")
    logger.info(f"Version: {app.version}")
    logger.info(f"Cost estimation strategy: {settings.ESTIMATION_STRATEGY}")
    logger.info("=" * 60)

    yield  # Application runs here

    # Shutdown
    logger.info("HomeCost Application Shutting Down")
    logger.info("=" * 60)


# Create FastAPI application instance
app = FastAPI(
    title="HomeCost",
    description="Monthly mortgage payment estimates for a property and a borrower's financial profile.",
    version="1.0.0",
    lifespan=lifespan
)

@app.get("/")
async def root():
    return RedirectResponse(url="/api/calculations")

# Include route modules
app.include_router(auth.router, tags=["Authentication"])
app.include_router(profile.router, tags=["Profile"])
app.include_router(calculations.router, tags=["Calculations"])

logger.info("All routes registered successfully")

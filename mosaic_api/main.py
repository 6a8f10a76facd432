"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from mosaic_api.config import settings
from mosaic_api.middleware.error_handler import ErrorHandlerMiddleware
from mosaic_api.middleware.rate_limiter import limiter
from mosaic_api.api.v1.routers import mosaic

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Analysis config: overlap_threshold={settings.overlap_threshold_degrees}°, "
                f"density_thresholds=({settings.density_threshold_low}, "
                f"{settings.density_threshold_medium}, {settings.density_threshold_high}), "
                f"max_points={settings.max_points}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Mosaic Suitability Analysis API

    This API decides whether a collection of geotagged photographs can be
    assembled into a photographic mosaic map, using only their coordinates.

    ## Features

    - **Overlap Grouping**: Cluster images whose positions lie within an overlap
      threshold into connected groups
    - **Coverage Geometry**: Measure the covered area with the Haversine formula
    - **Suitability Scoring**: Combine image count, overlap, density and
      distribution into a 0-100 score with a recommendation
    - **Zoom Estimation**: Suggest a display zoom level and rendered pixel size
    - **Rate Limiting**: Protects the API from abuse

    ## Scoring

    | Component | Max |
    |---|---|
    | Image count | 20 |
    | Overlap | 40 |
    | Density | 30 |
    | Distribution | 10 |
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(mosaic.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }

"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from treelog.config import settings
from treelog.middleware.error_handler import ErrorHandlerMiddleware
from treelog.api.rate_limit import limiter
from treelog.api.v1.routers import coordinates, growth_logs, reports

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

    Loads the records once on startup and closes the store client on shutdown.
    """
    from treelog.api.dependencies import get_survey_service
    from treelog.domain.catalogs import get_catalog
    from treelog.infrastructure.sheet_store_client import get_store_client
    from treelog.services.domain.record_store import get_record_store

    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Store: {settings.store_url} "
                f"(collections: {settings.growth_collection}, {settings.spatial_collection})")
    logger.info(f"Projection: UTM zone {settings.utm_zone}{settings.utm_hemisphere}, "
                f"join policy: {settings.join_policy}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    client = get_store_client()
    if settings.sync_on_startup:
        service = get_survey_service(client, get_record_store(), get_catalog())
        state = await service.sync()
        for notice in state.notices:
            logger.info(f"Startup sync: {notice.message}")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Tree Survey Records API for forest plot monitoring

    This API keeps field-survey observations of trees (growth metrics and
    survival status) together with their coordinate placements, and derives
    identifiers, map layers and statistics from them.

    ## Features

    - **Identity Derivation**: Canonical tree codes and on-site tag labels from
      plot, species, tree number and row
    - **Coordinate Projection**: UTM easting/northing converted to latitude/longitude
    - **Filtering**: Growth table search by tree code or species, plot and status
    - **Map Layer**: Placements joined with observations and colored by status
    - **Statistics**: Survival rates, species and plot breakdowns, coordinate coverage
    - **Store Resilience**: Read retries with exponential backoff; failed reloads
      never clear loaded data; writes report confirmed, failed or pending
    - **Rate Limiting**: Protects the API from abuse
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
app.include_router(growth_logs.router, prefix="/api/v1")
app.include_router(coordinates.router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")


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
        Health status with the size of the loaded collections
    """
    from treelog.services.domain.record_store import get_record_store

    state = get_record_store().state
    return {
        "status": "healthy",
        "service": settings.app_name,
        "growth_records": len(state.growth),
        "spatial_records": len(state.spatial),
    }

"""
jq2react Service - FastAPI Application

Converts posted jQuery scripts and pages to React function components.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from jq2react import __version__
from jq2react.config import settings, configure_logging
from jq2react.api.routes import health, convert

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.SERVICE_NAME} service")
    logger.info("=" * 60)
    logger.info(f"Service ready on port {settings.SERVICE_PORT}")

    yield

    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="jq2react Service",
    description="""
Converts jQuery-driven scripts into React function components.

## Features

- **Convert**: Selectors become refs or state, event bindings become effects with cleanup
- **Remote calls**: `$.ajax`, `$.get`, `$.getJSON` and `$.post` become `fetch` chains
- **Pages**: HTML pages contribute their inline scripts and styles
- **Analyze**: Idiom counts and a complexity rating for migration planning
""",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/jq2react/docs",
    redoc_url="/api/jq2react/redoc",
    openapi_url="/api/jq2react/openapi.json"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api/jq2react"

app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(convert.router, prefix=API_PREFIX, tags=["Conversion"])


# Root health check (for direct container health checks)
@app.get("/health")
async def root_health():
    """Root health check for container/load balancer"""
    return {"status": "UP", "service": settings.SERVICE_NAME}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "jq2react Service",
        "version": __version__,
        "port": settings.SERVICE_PORT,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "convert": f"{API_PREFIX}/convert",
            "analyze": f"{API_PREFIX}/analyze",
            "docs": f"{API_PREFIX}/docs"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "jq2react.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        reload=True
    )

"""Health check endpoint for load balancers"""
from fastapi import APIRouter
from jq2react.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "UP", "service": settings.SERVICE_NAME}


@router.get("/info")
async def info():
    """Service info endpoint"""
    from jq2react import __version__
    return {
        "service": settings.SERVICE_NAME,
        "version": __version__,
        "description": "jQuery to React component converter",
        "componentExtension": settings.COMPONENT_EXTENSION
    }

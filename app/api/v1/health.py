"""
Health check endpoint
"""
from fastapi import APIRouter

SERVICE_NAME = "leave-tracker-backend"

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint

    Returns service status.
    """
    return {
        "status": "ok",
        "service": SERVICE_NAME,
    }

"""
Health check endpoint
"""
from fastapi import APIRouter
from app.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint

    Returns service status and whether standin approval is switched on.
    """
    return {
        "status": "ok",
        "service": "leave-workflow-backend",
        "standin_approval_enabled": settings.STANDIN_APPROVAL_ENABLED,
    }

"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints of the announcement service
"""
from fastapi import APIRouter

from app.api.v1 import announcements, feed

router = APIRouter(
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Unauthorized"},
        404: {"description": "Not Found"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"}
    }
)

router.include_router(announcements.router, tags=["Announcements"])
router.include_router(feed.router, tags=["Announcement Feed"])

"""
API v1 Router
"""

from fastapi import APIRouter

from admschool.api.v1 import auth

router = APIRouter()

router.include_router(auth.router)

__all__ = ["router"]

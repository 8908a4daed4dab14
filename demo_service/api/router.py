"""Root API router wiring."""

from fastapi import APIRouter

from demo_service.api import demo


api_router = APIRouter()
api_router.include_router(demo.router)

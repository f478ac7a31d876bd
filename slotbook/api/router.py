"""
API router - aggregates the scheduling and health routes.
"""
from fastapi import APIRouter
from slotbook.api.scheduling import router as scheduling_router
from slotbook.api.health import router as health_router

api_router = APIRouter()
api_router.include_router(scheduling_router)
api_router.include_router(health_router)

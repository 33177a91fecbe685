"""
Main API router for v1 endpoints.
"""
from fastapi import APIRouter

from projectit.api.v1.endpoints import entities, functions, health, settings, webhooks

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(webhooks.router, prefix="/webhook", tags=["webhooks"])
api_router.include_router(functions.router, prefix="/functions", tags=["functions"])
api_router.include_router(entities.router, prefix="/entities", tags=["entities"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])

from fastapi import APIRouter

from nonap.api.routes import control, health, targets

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(targets.router, tags=["targets"])
api_router.include_router(control.router, tags=["control"])

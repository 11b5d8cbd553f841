from fastapi import APIRouter
from app.api.routes import chassis, health

api_router = APIRouter()
api_router.include_router(chassis.router, tags=["chassis"])


__all__ = ["api_router", "health"]

from fastapi import APIRouter

from app.models.chassis import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe - always OK while the process serves requests."""
    return HealthResponse()

from fastapi import APIRouter, Depends
from splito.core.config import Settings
from splito.core.dependencies import get_settings

router = APIRouter()

@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "split_remainder_strategy": settings.SPLIT_REMAINDER_STRATEGY,
    }

import logging
from fastapi import APIRouter, Depends, HTTPException
from splito.core.config import Settings
from splito.core.dependencies import get_settings
from splito.schemas.expense import SplitRequest, SplitRow, SplitMethodOut, ValidationResult
from splito.services.split_service import (
    SPLIT_METHODS,
    REMAINDER_STRATEGIES,
    calculate_splits,
    validate_split,
    split_method_label,
    split_method_description,
)

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/methods", response_model=list[SplitMethodOut])
async def split_methods():
    return [
        SplitMethodOut(
            method=method,
            label=split_method_label(method),
            description=split_method_description(method),
        )
        for method in SPLIT_METHODS
    ]

@router.post("/validate", response_model=ValidationResult)
async def validate(data: SplitRequest):
    return validate_split(data.method, data.amount, data)

@router.post("/calculate", response_model=list[SplitRow])
async def calculate(data: SplitRequest, settings: Settings = Depends(get_settings)):
    result = validate_split(data.method, data.amount, data)

    if not result.is_valid:
        logger.info("Rejected %s split of %s: %s", data.method, data.amount, result.error)
        raise HTTPException(400, result.error)

    strategy = data.strategy or settings.SPLIT_REMAINDER_STRATEGY

    if strategy not in REMAINDER_STRATEGIES:
        raise HTTPException(400, f"Unknown remainder strategy: {strategy}")

    return calculate_splits(data.method, data.amount, data, strategy)

import logging
from fastapi import APIRouter, HTTPException
from app.core.errors import RemoteError, ResponseShapeError, ValidationError
from app.flows.current_crop_agent import ask_current_crop_agent
from app.flows.market_analysis import market_analysis
from app.flows.post_harvest import get_post_harvest_advice
from app.models.schemas import (
    CropAgentAdvice,
    CropAgentQuery,
    MarketAnalysisInput,
    MarketAnalysisResult,
    PostHarvestAdvice,
    PostHarvestInput,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/advisory", tags=["advisory"])


@router.post("/market-analysis", response_model=MarketAnalysisResult)
async def run_market_analysis(request: MarketAnalysisInput):
    try:
        return await market_analysis(request)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (RemoteError, ResponseShapeError) as e:
        logger.error(f"Market analysis for {request.commodity} failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=502,
            detail="Could not fetch market analysis. The model may be temporarily unavailable. Please try again later.",
        )


@router.post("/post-harvest", response_model=PostHarvestAdvice)
async def run_post_harvest(request: PostHarvestInput):
    try:
        return await get_post_harvest_advice(request)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (RemoteError, ResponseShapeError) as e:
        logger.error(f"Post-harvest advice for crop {request.crop_context.id} failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail="Could not fetch post-harvest advice.")


@router.post("/crop-agent", response_model=CropAgentAdvice)
async def run_crop_agent(request: CropAgentQuery):
    try:
        return await ask_current_crop_agent(request)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (RemoteError, ResponseShapeError) as e:
        logger.error(f"Crop agent for crop {request.crop_context.id} failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail="The agent could not process your request.")

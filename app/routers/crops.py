import logging
from fastapi import APIRouter, HTTPException
from typing import List
from app.core.errors import RemoteError, ValidationError, WriteError
from app.models.schemas import CropContext, CropCreatedResponse, NewCrop
from app.services.crop_service import add_current_crop, get_all_current_crops, get_current_crop

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/crops", tags=["crops"])


@router.post("", response_model=CropCreatedResponse)
async def create_crop(crop: NewCrop):
    try:
        crop_id = await add_current_crop(crop)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except WriteError as e:
        logger.error(f"Add crop failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Could not add your crop.")

    return CropCreatedResponse(id=crop_id, message="Crop added successfully!")


@router.get("", response_model=List[CropContext])
async def list_crops():
    try:
        return await get_all_current_crops()
    except RemoteError as e:
        logger.error(f"Listing crops failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail="Could not load your crops.")


@router.get("/{crop_id}", response_model=CropContext)
async def get_crop(crop_id: str):
    try:
        crop = await get_current_crop(crop_id)
    except RemoteError as e:
        logger.error(f"Loading crop {crop_id} failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail="Could not load your crop.")

    if crop is None:
        raise HTTPException(status_code=404, detail="Crop not found")
    return crop

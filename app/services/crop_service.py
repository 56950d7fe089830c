import datetime
import logging
from typing import Any, Dict, List, Optional
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError as SchemaError
from pymongo.errors import PyMongoError
from app.core.config import CURRENT_CROPS_COLLECTION
from app.core.database import mongodb
from app.core.errors import RemoteError, WriteError
from app.flows.common import validate_input
from app.models.schemas import CropContext, NewCrop

logger = logging.getLogger(__name__)


def _collection():
    return mongodb.get_database()[CURRENT_CROPS_COLLECTION]


def _to_crop_context(doc: Dict[str, Any]) -> CropContext:
    return CropContext(
        id=str(doc["_id"]),
        crop_name=doc["cropName"],
        field_size=doc["fieldSize"],
        location=doc["location"],
        sowing_date=doc["sowingDate"],
        additional_info=doc.get("additionalInfo") or None,
    )


async def add_current_crop(fields: Any) -> str:
    crop = validate_input(NewCrop, fields)

    document = {
        "cropName": crop.crop_name,
        "fieldSize": crop.field_size,
        "location": crop.location,
        "sowingDate": crop.sowing_date.isoformat(),
        "additionalInfo": crop.additional_info or "",
        "createdAt": datetime.datetime.now(datetime.timezone.utc),
    }

    try:
        result = await _collection().insert_one(document)
    except PyMongoError as e:
        logger.error(f"Failed to store crop {crop.crop_name}: {str(e)}", exc_info=True)
        raise WriteError(f"Could not add crop: {str(e)}") from e

    if not result.inserted_id:
        raise WriteError("Failed to get new crop ID.")

    crop_id = str(result.inserted_id)
    logger.info(f"Stored current crop {crop_id} ({crop.crop_name})")
    return crop_id


async def get_all_current_crops() -> List[CropContext]:
    crops = []
    try:
        # order is whatever the store returns
        async for doc in _collection().find():
            try:
                crops.append(_to_crop_context(doc))
            except (KeyError, SchemaError) as e:
                logger.warning(f"Skipping malformed crop document {doc.get('_id')}: {str(e)}")
    except PyMongoError as e:
        logger.error(f"Failed to load current crops: {str(e)}", exc_info=True)
        raise RemoteError("Could not load your crops.") from e
    return crops


async def get_current_crop(crop_id: str) -> Optional[CropContext]:
    try:
        object_id = ObjectId(crop_id)
    except (InvalidId, TypeError):
        return None

    try:
        doc = await _collection().find_one({"_id": object_id})
    except PyMongoError as e:
        logger.error(f"Failed to load crop {crop_id}: {str(e)}", exc_info=True)
        raise RemoteError("Could not load the selected crop.") from e

    if not doc:
        return None
    try:
        return _to_crop_context(doc)
    except (KeyError, SchemaError) as e:
        logger.error(f"Crop {crop_id} is malformed in the store: {str(e)}")
        raise RemoteError("Could not load the selected crop.") from e

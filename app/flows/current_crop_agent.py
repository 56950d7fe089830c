from typing import Any
from app.flows.common import validate_input, validate_output, resolve_language, or_placeholder, generate_json
from app.models.schemas import CropAgentQuery, CropAgentAdvice
from app.services.prompts import CROP_AGENT_PROMPT


async def ask_current_crop_agent(payload: Any) -> CropAgentAdvice:
    """Answer a free-form question about one crop that is in the field."""
    request = validate_input(CropAgentQuery, payload)
    crop = request.crop_context
    prompt = CROP_AGENT_PROMPT.format(
        crop_name=crop.crop_name,
        field_size=crop.field_size,
        location=crop.location,
        sowing_date=crop.sowing_date,
        additional_info=or_placeholder(crop.additional_info),
        query=request.query,
        language=resolve_language(request.language),
    )
    data = await generate_json(prompt, "CurrentCropAgentOutput")
    return validate_output(CropAgentAdvice, data, "CurrentCropAgentOutput")

from typing import Any
from app.flows.common import validate_input, validate_output, resolve_language, or_placeholder, generate_json
from app.models.schemas import PostHarvestInput, PostHarvestAdvice
from app.services.prompts import POST_HARVEST_PROMPT


def build_post_harvest_prompt(request: PostHarvestInput) -> str:
    crop = request.crop_context
    return POST_HARVEST_PROMPT.format(
        crop_name=crop.crop_name,
        field_size=crop.field_size,
        location=crop.location,
        sowing_date=crop.sowing_date,
        additional_info=or_placeholder(crop.additional_info),
        estimated_yield=or_placeholder(request.estimated_yield, "Not provided"),
        language=resolve_language(request.language),
    )


async def get_post_harvest_advice(payload: Any) -> PostHarvestAdvice:
    """Eight-section post-harvest plan for one crop.

    Raises ValidationError before any remote call when the crop context is
    incomplete, RemoteError when Gemini cannot be reached, and
    ResponseShapeError when the reply is not exactly the eight sections.
    """
    request = validate_input(PostHarvestInput, payload)
    data = await generate_json(build_post_harvest_prompt(request), "PostHarvestOutput")
    return validate_output(PostHarvestAdvice, data, "PostHarvestOutput")

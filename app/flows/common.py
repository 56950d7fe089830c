"""Helpers shared by every flow: input/output validation and the remote call."""
import logging
from typing import Any, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError as SchemaError
from starlette.concurrency import run_in_threadpool
from app.core.config import DEFAULT_LANGUAGE
from app.core.errors import ValidationError, ResponseShapeError
from app.services.gemini_service import call_gemini

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _describe(error: SchemaError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "input"
    return f"{location}: {first.get('msg', 'invalid value')}"


def validate_input(model: Type[ModelT], payload: Any) -> ModelT:
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)
    try:
        return model.model_validate(payload)
    except SchemaError as e:
        message = _describe(e)
        raise ValidationError(message, field=message.split(":", 1)[0]) from e


def validate_output(model: Type[ModelT], data: Any, schema_name: str) -> ModelT:
    try:
        return model.model_validate(data)
    except SchemaError as e:
        logger.warning(f"{schema_name} reply rejected with {e.error_count()} schema errors")
        raise ResponseShapeError(f"{schema_name} reply does not match schema: {_describe(e)}") from e


def resolve_language(language: Optional[str]) -> str:
    return language.strip() if language and language.strip() else DEFAULT_LANGUAGE


def or_placeholder(value: Optional[str], placeholder: str = "None provided") -> str:
    return value.strip() if value and value.strip() else placeholder


async def generate_json(prompt: str, schema_name: str) -> Any:
    # requests is blocking; keep the event loop free while Gemini works
    return await run_in_threadpool(call_gemini, prompt, schema_name)

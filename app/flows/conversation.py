from typing import Any, Dict, List
from starlette.concurrency import run_in_threadpool
from app.core.errors import ResponseShapeError
from app.flows.common import validate_input, resolve_language
from app.models.schemas import ChatRequest
from app.services.gemini_service import call_gemini_chat
from app.services.prompts import CHAT_SYSTEM_PROMPT


def build_chat_contents(request: ChatRequest) -> List[Dict[str, Any]]:
    # oldest first, current query last
    contents = [
        {"role": message.role, "parts": [{"text": message.content}]}
        for message in request.history
    ]
    contents.append({"role": "user", "parts": [{"text": request.query}]})
    return contents


async def start_chat(payload: Any) -> str:
    request = validate_input(ChatRequest, payload)
    system_instruction = CHAT_SYSTEM_PROMPT.format(language=resolve_language(request.language))
    reply = await run_in_threadpool(call_gemini_chat, build_chat_contents(request), system_instruction)
    if not reply:
        raise ResponseShapeError("Chat reply is empty")
    return reply

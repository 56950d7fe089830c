import logging
from fastapi import APIRouter, HTTPException
from app.core.errors import RemoteError, ResponseShapeError, ValidationError
from app.flows.conversation import start_chat
from app.flows.text_to_speech import text_to_speech
from app.models.schemas import ChatRequest, ChatResponse, SpeechRequest, SpeechResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(request: ChatRequest):
    try:
        reply = await start_chat(request)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (RemoteError, ResponseShapeError) as e:
        logger.error(f"Chat error after {len(request.history)} messages: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail="An unexpected error occurred.")

    return ChatResponse(reply=reply)


@router.post("/speech", response_model=SpeechResult)
async def speech(request: SpeechRequest):
    try:
        return await text_to_speech(request)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (RemoteError, ResponseShapeError) as e:
        logger.error(f"TTS error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail="Could not generate audio for the response.")

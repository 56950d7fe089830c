import base64
from typing import Any
from starlette.concurrency import run_in_threadpool
from app.flows.common import validate_input
from app.models.schemas import SpeechRequest, SpeechResult
from app.services.gemini_service import synthesize_speech, pcm_to_wav


async def text_to_speech(payload: Any) -> SpeechResult:
    request = validate_input(SpeechRequest, payload)
    pcm = await run_in_threadpool(synthesize_speech, request.text)
    encoded = base64.b64encode(pcm_to_wav(pcm)).decode("ascii")
    return SpeechResult(audio_data_uri=f"data:audio/wav;base64,{encoded}")

import base64
import io
import json
import logging
import wave
import requests
from typing import Dict, Any, List
from app.core.config import (
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GEMINI_TTS_MODEL,
    GEMINI_BASE_URL,
    HTTP_TIMEOUT,
    TTS_VOICE,
    TTS_SAMPLE_RATE,
    TTS_SAMPLE_WIDTH,
    TTS_CHANNELS,
)
from app.core.errors import RemoteError, ResponseShapeError

logger = logging.getLogger(__name__)


def _post(model: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    if not GEMINI_API_KEY:
        raise RemoteError("GEMINI_API_KEY environment variable not set")

    url = f"{GEMINI_BASE_URL}/models/{model}:generateContent?key={GEMINI_API_KEY}"
    headers = {"Content-Type": "application/json"}

    try:
        response = requests.post(url, headers=headers, json=payload, timeout=HTTP_TIMEOUT)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise RemoteError(f"Gemini request timed out after {HTTP_TIMEOUT}s") from e
    except requests.exceptions.RequestException as e:
        raise RemoteError(f"Gemini request failed: {e}") from e

    try:
        return response.json()
    except ValueError as e:
        raise ResponseShapeError("Gemini returned a body that is not JSON") from e


def _first_part(data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        part = data["candidates"][0]["content"]["parts"][0]
    except (KeyError, IndexError, TypeError) as e:
        raise ResponseShapeError("No candidates in response") from e
    if not isinstance(part, dict):
        raise ResponseShapeError("Response part is not an object")
    return part


def _part_text(data: Dict[str, Any]) -> str:
    text = _first_part(data).get("text")
    if not isinstance(text, str):
        raise ResponseShapeError("Response part carries no text")
    return text


def strip_code_fences(text_content: str) -> str:
    text_content = text_content.strip()
    if text_content.startswith("```json"):
        text_content = text_content[7:]
    elif text_content.startswith("```"):
        text_content = text_content[3:]
    if text_content.endswith("```"):
        text_content = text_content[:-3]
    return text_content.strip()


def call_gemini(prompt: str, schema_name: str = "output", temperature: float = 0.2) -> Any:
    """Send one instruction in JSON mode and return the decoded reply.

    The caller validates the decoded value against its own output model;
    this function only guarantees that the reply is well-formed JSON.
    """
    payload = {
        "contents": [{
            "role": "user",
            "parts": [{
                "text": prompt
            }]
        }],
        "generationConfig": {
            "temperature": temperature,
            "topK": 40,
            "topP": 0.95,
            "maxOutputTokens": 8192,
            "responseMimeType": "application/json",
        }
    }

    logger.info(f"Calling Gemini model {GEMINI_MODEL} for {schema_name}")
    data = _post(GEMINI_MODEL, payload)
    text_content = strip_code_fences(_part_text(data))

    try:
        return json.loads(text_content)
    except json.JSONDecodeError as e:
        raise ResponseShapeError(f"Gemini reply for {schema_name} is not valid JSON: {e}") from e


def call_gemini_chat(contents: List[Dict[str, Any]], system_instruction: str, temperature: float = 0.7) -> str:
    payload = {
        "systemInstruction": {
            "parts": [{"text": system_instruction}]
        },
        "contents": contents,
        "generationConfig": {
            "temperature": temperature,
            "topK": 40,
            "topP": 0.95,
            "maxOutputTokens": 2048,
        }
    }

    logger.info(f"Calling Gemini model {GEMINI_MODEL} for chat with {len(contents)} turns")
    data = _post(GEMINI_MODEL, payload)
    return _part_text(data).strip()


def synthesize_speech(text: str, voice: str = TTS_VOICE) -> bytes:
    """Return raw PCM audio for ``text`` from the Gemini speech model."""
    payload = {
        "contents": [{
            "parts": [{
                "text": text
            }]
        }],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {
                "voiceConfig": {
                    "prebuiltVoiceConfig": {"voiceName": voice}
                }
            }
        }
    }

    logger.info(f"Calling Gemini model {GEMINI_TTS_MODEL} for speech ({len(text)} chars)")
    data = _post(GEMINI_TTS_MODEL, payload)
    inline = _first_part(data).get("inlineData") or {}
    encoded = inline.get("data") if isinstance(inline, dict) else None
    if not isinstance(encoded, str) or not encoded:
        raise ResponseShapeError("No audio data in speech response")

    try:
        return base64.b64decode(encoded)
    except ValueError as e:
        raise ResponseShapeError("Speech response audio is not valid base64") from e


def pcm_to_wav(pcm: bytes) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(TTS_CHANNELS)
        wav_file.setsampwidth(TTS_SAMPLE_WIDTH)
        wav_file.setframerate(TTS_SAMPLE_RATE)
        wav_file.writeframes(pcm)
    return buffer.getvalue()

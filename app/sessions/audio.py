import itertools
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional
from app.core.errors import FlowError
from app.flows.text_to_speech import text_to_speech
from app.models.schemas import SpeechResult

logger = logging.getLogger(__name__)


class AudioEvent(str, Enum):
    PLAY = "play"
    PAUSE = "pause"
    ENDED = "ended"


class AudioClip:
    """Handle for one synthesised clip. Once released it cannot play again."""

    def __init__(self, clip_id: int, data_uri: str):
        self.clip_id = clip_id
        self.data_uri = data_uri
        self.playing = False
        self.position = 0.0
        self.released = False

    def play(self):
        if self.released:
            raise RuntimeError(f"Audio clip {self.clip_id} has been released")
        self.playing = True

    def pause(self):
        self.playing = False

    def stop(self):
        self.playing = False
        self.position = 0.0

    def release(self):
        self.stop()
        self.released = True


class AudioSession:
    """Owns the single current clip of a page session."""

    def __init__(self, synthesize: Callable[[Any], Awaitable[SpeechResult]] = text_to_speech):
        self._synthesize = synthesize
        self._current: Optional[AudioClip] = None
        self._ids = itertools.count(1)
        self.last_error: Optional[str] = None

    @property
    def current(self) -> Optional[AudioClip]:
        return self._current

    @property
    def is_playing(self) -> bool:
        return self._current is not None and self._current.playing

    def stop_current(self):
        if self._current is not None:
            self._current.release()
            self._current = None

    async def speak(self, text: str, auto_play: bool = False) -> Optional[AudioClip]:
        self.stop_current()
        if not text or not text.strip():
            return None

        try:
            speech = await self._synthesize({"text": text})
        except FlowError as e:
            logger.error(f"TTS error: {str(e)}", exc_info=True)
            self.last_error = "Could not generate audio for the response."
            return None

        # another speak() may have taken the slot while synthesis was pending
        self.stop_current()
        clip = AudioClip(next(self._ids), speech.audio_data_uri)
        self._current = clip
        self.last_error = None
        if auto_play:
            clip.play()
        return clip

    def handle_event(self, event: AudioEvent):
        clip = self._current
        if clip is None:
            return
        if event is AudioEvent.PLAY:
            clip.play()
        elif event is AudioEvent.PAUSE:
            clip.pause()
        elif event is AudioEvent.ENDED:
            self.stop_current()

    def snapshot(self) -> Dict[str, Any]:
        clip = self._current
        return {
            "clipId": clip.clip_id if clip else None,
            "audioDataUri": clip.data_uri if clip else None,
            "isPlaying": self.is_playing,
            "error": self.last_error,
        }

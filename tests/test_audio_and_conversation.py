"""
Tests for exclusive audio playback and the chat session
"""
import asyncio

import pytest

from app.core.errors import RemoteError, SubmissionInProgress, ValidationError
from app.models.schemas import SpeechResult
from app.sessions.audio import AudioEvent, AudioSession
from app.sessions.conversation import FALLBACK_REPLY, ConversationSession


class FakeSpeech:
    def __init__(self, error=None):
        self.texts = []
        self.error = error

    async def __call__(self, payload):
        self.texts.append(payload["text"])
        if self.error:
            raise self.error
        return SpeechResult(audio_data_uri=f"data:audio/wav;base64,{len(self.texts)}")


class FakeChat:
    def __init__(self, replies):
        self.replies = list(replies)
        self.payloads = []

    async def __call__(self, payload):
        self.payloads.append(payload)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


# ---------- Audio ----------

@pytest.mark.asyncio
async def test_new_playback_stops_current_clip_first():
    audio = AudioSession(synthesize=FakeSpeech())

    clip_a = await audio.speak("message A", auto_play=True)
    assert clip_a.playing

    clip_b = await audio.speak("message B", auto_play=True)

    assert not clip_a.playing
    assert clip_a.released
    assert clip_b.playing
    assert audio.current is clip_b


@pytest.mark.asyncio
async def test_overlapping_synthesis_never_leaves_two_clips_playing():
    gate = asyncio.Event()
    clips = []

    async def slow_then_fast(payload):
        if payload["text"] == "slow":
            await gate.wait()
        return SpeechResult(audio_data_uri=f"data:{payload['text']}")

    audio = AudioSession(synthesize=slow_then_fast)
    slow = asyncio.create_task(audio.speak("slow", auto_play=True))
    await asyncio.sleep(0)
    clips.append(await audio.speak("fast", auto_play=True))
    gate.set()
    clips.append(await slow)

    playing = [clip for clip in clips if clip.playing]
    assert len(playing) == 1
    assert audio.current is playing[0]


@pytest.mark.asyncio
async def test_lifecycle_events():
    audio = AudioSession(synthesize=FakeSpeech())
    clip = await audio.speak("hello")
    assert not audio.is_playing

    audio.handle_event(AudioEvent.PLAY)
    assert audio.is_playing
    audio.handle_event(AudioEvent.PAUSE)
    assert not audio.is_playing
    audio.handle_event(AudioEvent.ENDED)

    assert audio.current is None
    assert clip.released
    with pytest.raises(RuntimeError):
        clip.play()


@pytest.mark.asyncio
async def test_blank_text_is_not_synthesised():
    speech = FakeSpeech()
    audio = AudioSession(synthesize=speech)

    assert await audio.speak("   ") is None
    assert speech.texts == []


@pytest.mark.asyncio
async def test_speech_failure_is_recorded_not_raised():
    audio = AudioSession(synthesize=FakeSpeech(error=RemoteError("tts down")))

    assert await audio.speak("hello", auto_play=True) is None
    assert audio.last_error == "Could not generate audio for the response."
    assert audio.snapshot()["isPlaying"] is False


# ---------- Conversation ----------

@pytest.mark.asyncio
async def test_conversation_passes_prior_history_only():
    chat = FakeChat(["reply one", "reply two"])
    session = ConversationSession(AudioSession(synthesize=FakeSpeech()), chat=chat)

    await session.submit("question one")
    await session.submit("question two", language="Tamil")

    second = chat.payloads[1]
    assert second["query"] == "question two"
    assert second["language"] == "Tamil"
    assert [(m.role, m.content) for m in second["history"]] == [
        ("user", "question one"),
        ("model", "reply one"),
    ]
    assert [m.content for m in session.messages] == ["question one", "reply one", "question two", "reply two"]


@pytest.mark.asyncio
async def test_conversation_speaks_reply():
    speech = FakeSpeech()
    session = ConversationSession(AudioSession(synthesize=speech), chat=FakeChat(["Sow in June."]))

    await session.submit("When to sow?")

    assert speech.texts == ["Sow in June."]
    assert session.audio.is_playing


@pytest.mark.asyncio
async def test_conversation_failure_appends_fallback():
    speech = FakeSpeech()
    session = ConversationSession(AudioSession(synthesize=speech), chat=FakeChat([RemoteError("down")]))

    answer = await session.submit("hello")

    assert answer.content == FALLBACK_REPLY
    assert session.messages[-1].role == "model"
    assert session.last_error == "An unexpected error occurred."
    assert not session.loading
    assert speech.texts == []


@pytest.mark.asyncio
async def test_sending_a_message_stops_current_audio():
    audio = AudioSession(synthesize=FakeSpeech())
    session = ConversationSession(audio, chat=FakeChat(["first", "second"]))
    await session.submit("one")
    first_clip = audio.current

    await session.submit("two", auto_speak=False)

    assert first_clip.released
    assert audio.current is None


@pytest.mark.asyncio
async def test_conversation_rejects_blank_and_concurrent_messages():
    gate = asyncio.Event()

    async def slow_chat(payload):
        await gate.wait()
        return "done"

    session = ConversationSession(AudioSession(synthesize=FakeSpeech()), chat=slow_chat)

    with pytest.raises(ValidationError):
        await session.submit("  ")

    task = asyncio.create_task(session.submit("first"))
    await asyncio.sleep(0)
    with pytest.raises(SubmissionInProgress):
        await session.submit("second")

    gate.set()
    await task
    assert [m.content for m in session.messages] == ["first", "done"]


@pytest.mark.asyncio
async def test_unexpected_chat_error_clears_loading():
    session = ConversationSession(AudioSession(synthesize=FakeSpeech()), chat=FakeChat([KeyError("parts"), "second reply"]))

    with pytest.raises(KeyError):
        await session.submit("first")
    assert not session.loading

    answer = await session.submit("second", auto_speak=False)
    assert answer.content == "second reply"

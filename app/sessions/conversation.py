import logging
from typing import Any, Awaitable, Callable, List, Optional
from app.core.errors import FlowError, SubmissionInProgress, ValidationError
from app.flows.conversation import start_chat
from app.models.schemas import Message
from app.sessions.audio import AudioSession

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I encountered an error. Please try again."


class ConversationSession:
    def __init__(self, audio: AudioSession, chat: Callable[[Any], Awaitable[str]] = start_chat):
        self.audio = audio
        self._chat = chat
        self.messages: List[Message] = []
        self.loading = False
        self.last_error: Optional[str] = None

    async def submit(self, query: Optional[str], language: Optional[str] = None, auto_speak: bool = True) -> Message:
        if not query or not query.strip():
            raise ValidationError("Message is required", field="query")
        if self.loading:
            raise SubmissionInProgress("A message is already being answered")

        history = list(self.messages)
        self.messages.append(Message(role="user", content=query))
        self.loading = True

        try:
            self.audio.stop_current()
            try:
                reply = await self._chat({"query": query, "language": language, "history": history})
            except FlowError as e:
                logger.error(f"Conversational agent error: {str(e)}", exc_info=True)
                self.last_error = "An unexpected error occurred."
                answer = Message(role="model", content=FALLBACK_REPLY)
                self.messages.append(answer)
                return answer

            answer = Message(role="model", content=reply)
            self.messages.append(answer)
            self.last_error = None
            if auto_speak:
                await self.audio.speak(reply, auto_play=True)
            return answer
        finally:
            self.loading = False

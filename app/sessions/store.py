import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from app.core.config import RESULT_POLICY, SESSION_IDLE_TTL
from app.sessions.audio import AudioSession
from app.sessions.conversation import ConversationSession
from app.sessions.crop_agent import CropAgentSession
from app.sessions.form_state import ResultPolicy

logger = logging.getLogger(__name__)


@dataclass
class PageSession:
    session_id: str
    crop_agent: CropAgentSession
    audio: AudioSession = field(default_factory=AudioSession)
    conversation: Optional[ConversationSession] = None
    last_seen: float = 0.0

    def __post_init__(self):
        if self.conversation is None:
            self.conversation = ConversationSession(self.audio)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "state": self.crop_agent.snapshot(),
            "messages": [m.model_dump(by_alias=True) for m in self.conversation.messages],
            "audio": self.audio.snapshot(),
        }


class SessionStore:
    """In-memory page sessions.

    A session not looked up for ``idle_ttl`` seconds is dropped on the next
    ``create`` or ``get``. Its audio clip is released when it goes.
    """

    def __init__(
        self,
        default_policy: str = RESULT_POLICY,
        idle_ttl: float = SESSION_IDLE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_policy = ResultPolicy(default_policy)
        self.idle_ttl = idle_ttl
        self._clock = clock
        self._sessions: Dict[str, PageSession] = {}

    def create(self, policy: Optional[ResultPolicy] = None) -> PageSession:
        self.sweep()
        session_id = str(uuid.uuid4())
        session = PageSession(
            session_id=session_id,
            crop_agent=CropAgentSession(policy=policy or self.default_policy),
            last_seen=self._clock(),
        )
        self._sessions[session_id] = session
        logger.info(f"Created page session {session_id} ({session.crop_agent.policy.value})")
        return session

    def get(self, session_id: str) -> Optional[PageSession]:
        self.sweep()
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_seen = self._clock()
        return session

    def discard(self, session_id: str):
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.audio.stop_current()

    def sweep(self) -> int:
        cutoff = self._clock() - self.idle_ttl
        expired = [sid for sid, session in self._sessions.items() if session.last_seen < cutoff]
        for session_id in expired:
            self.discard(session_id)
        if expired:
            logger.info(f"Dropped {len(expired)} idle page sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


session_store = SessionStore()

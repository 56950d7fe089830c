import logging
from fastapi import APIRouter, HTTPException
from typing import Optional
from app.core.errors import RemoteError, SubmissionInProgress, ValidationError
from app.models.schemas import (
    SessionChatRequest,
    SessionCreatedResponse,
    SessionMarketRequest,
    SessionPostHarvestRequest,
    SessionQueryRequest,
    SessionSnapshot,
)
from app.sessions.audio import AudioEvent
from app.sessions.form_state import ResultPolicy
from app.sessions.store import PageSession, session_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_session(session_id: str) -> PageSession:
    session = session_store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


async def _submit(session: PageSession, submission) -> SessionSnapshot:
    try:
        await submission
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SubmissionInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RemoteError as e:
        logger.error(f"Session {session.session_id} could not load its crop: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail="Could not load your crops.")
    return SessionSnapshot(**session.snapshot())


@router.post("", response_model=SessionCreatedResponse)
async def create_session(policy: Optional[ResultPolicy] = None):
    session = session_store.create(policy)
    return SessionCreatedResponse(session_id=session.session_id, result_policy=session.crop_agent.policy.value)


@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str):
    return SessionSnapshot(**_get_session(session_id).snapshot())


@router.delete("/{session_id}")
async def delete_session(session_id: str):
    _get_session(session_id)
    session_store.discard(session_id)
    return {"message": f"Session {session_id} closed"}


@router.post("/{session_id}/query", response_model=SessionSnapshot)
async def ask_agent(session_id: str, request: SessionQueryRequest):
    session = _get_session(session_id)
    return await _submit(session, session.crop_agent.ask(request.selected_crop_id, request.query, request.language))


@router.post("/{session_id}/market-analysis", response_model=SessionSnapshot)
async def analyse_market(session_id: str, request: SessionMarketRequest):
    session = _get_session(session_id)
    return await _submit(session, session.crop_agent.analyse_market(request.selected_crop_id, request.language))


@router.post("/{session_id}/post-harvest", response_model=SessionSnapshot)
async def post_harvest_help(session_id: str, request: SessionPostHarvestRequest):
    session = _get_session(session_id)
    return await _submit(
        session,
        session.crop_agent.post_harvest_help(request.selected_crop_id, request.estimated_yield, request.language),
    )


@router.post("/{session_id}/chat", response_model=SessionSnapshot)
async def send_message(session_id: str, request: SessionChatRequest):
    session = _get_session(session_id)
    return await _submit(session, session.conversation.submit(request.query, request.language))


@router.post("/{session_id}/audio/{event}", response_model=SessionSnapshot)
async def audio_event(session_id: str, event: AudioEvent):
    session = _get_session(session_id)
    session.audio.handle_event(event)
    return SessionSnapshot(**session.snapshot())


@router.delete("/{session_id}/audio", response_model=SessionSnapshot)
async def stop_audio(session_id: str):
    session = _get_session(session_id)
    session.audio.stop_current()
    return SessionSnapshot(**session.snapshot())

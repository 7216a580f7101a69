"""Read-only REST API over the reading session history."""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from outloud.errors import PersistenceError
from outloud.models.session import ProgressStats, ReadingSession
from outloud.storage.sessions import SessionStore

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def validate_session_id(session_id: str) -> str:
    try:
        uuid.UUID(session_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid session ID format")
    return session_id


def _load_sessions(store: SessionStore) -> list[ReadingSession]:
    try:
        return store.load_all()
    except PersistenceError as e:
        logger.warning("session_history_unreadable", error=e.description)
        raise HTTPException(status_code=500, detail=e.description)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/sessions")
async def list_sessions(store: SessionStore = Depends(get_store)) -> list[dict]:
    """List stored sessions, newest first."""
    return [
        {
            "id": s.id,
            "timestamp": s.timestamp.isoformat(),
            "overall_score": s.score.overall_score,
            "wpm": round(s.metrics.wpm, 1),
            "accuracy": s.metrics.accuracy,
            "achievements": s.score.achievement_names,
        }
        for s in _load_sessions(store)
    ]


@router.get("/sessions/stats")
async def get_progress_stats(store: SessionStore = Depends(get_store)) -> ProgressStats:
    """Averages, best score and improvement trend over the history."""
    return store.progress_stats()


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str, store: SessionStore = Depends(get_store)
) -> ReadingSession:
    """Get a specific session's full data."""
    session_id = validate_session_id(session_id)
    for session in _load_sessions(store):
        if session.id == session_id:
            return session
    raise HTTPException(status_code=404, detail="Session not found")


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, store: SessionStore = Depends(get_store)) -> dict:
    session_id = validate_session_id(session_id)
    try:
        store.delete(session_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.description)
    return {"deleted": session_id}

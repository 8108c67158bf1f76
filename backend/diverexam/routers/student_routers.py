from fastapi import APIRouter, Depends, HTTPException, status
from starlette.responses import Response
from uuid import UUID
import logging

from ..dependencies import get_exam_session, get_registry, parse_mode
from ..schemas.exam_session_schema import (
    AnswerPayload,
    SessionResult,
    SessionView,
    TranscriptPayload,
    VoiceToggleResult,
)
from ..schemas.question_schema import ExamMode
from ..services.exam_service import _session_result, _session_to_view
from ..services.session_registry import SessionRegistry
from ..services.session_service import ExamSession
from ..services.voice_service import TranscriptRelay

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_open(session: ExamSession):
    if session.is_submitted:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Exam already submitted")


@router.post("/exams/{exam_slug}/sessions", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def start_exam(exam_slug: str, mode: ExamMode = Depends(parse_mode), registry: SessionRegistry = Depends(get_registry)):
    session = await registry.create(exam_slug, mode)
    if session.is_not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Exam not found: no questions for {exam_slug}")
    return _session_to_view(session)


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session: ExamSession = Depends(get_exam_session)):
    return _session_to_view(session)


@router.put("/sessions/{session_id}/answers/{question_id}", response_model=SessionView)
async def save_answer(question_id: str, payload: AnswerPayload, session: ExamSession = Depends(get_exam_session)):
    _ensure_open(session)
    if not session.has_question(question_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found in this exam")
    session.set_answer(question_id, payload.value)
    return _session_to_view(session)


@router.post("/sessions/{session_id}/next", response_model=SessionView)
async def next_question(session: ExamSession = Depends(get_exam_session)):
    _ensure_open(session)
    session.go_next()
    return _session_to_view(session)


@router.post("/sessions/{session_id}/previous", response_model=SessionView)
async def previous_question(session: ExamSession = Depends(get_exam_session)):
    _ensure_open(session)
    session.go_previous()
    return _session_to_view(session)


@router.post("/sessions/{session_id}/voice", response_model=VoiceToggleResult)
async def toggle_voice(session: ExamSession = Depends(get_exam_session)):
    _ensure_open(session)
    notice = session.toggle_recording()
    return VoiceToggleResult(is_recording_voice=session.is_recording_voice, notice=notice)


@router.post("/sessions/{session_id}/voice/transcript", response_model=SessionView)
async def push_transcript(payload: TranscriptPayload, session: ExamSession = Depends(get_exam_session)):
    _ensure_open(session)
    if not isinstance(session.voice, TranscriptRelay) or not session.is_recording_voice:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Voice capture is not active")
    session.voice.push(payload.text, payload.is_final)
    return _session_to_view(session)


@router.post("/sessions/{session_id}/submit", response_model=SessionResult)
async def submit_exam(session: ExamSession = Depends(get_exam_session)):
    # submitting twice returns the first result
    await session.submit()
    return _session_result(session)


@router.get("/sessions/{session_id}/result", response_model=SessionResult)
async def get_result(session: ExamSession = Depends(get_exam_session)):
    if not session.is_submitted:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Exam has not been submitted yet")
    return _session_result(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_session(session_id: UUID, registry: SessionRegistry = Depends(get_registry)):
    if not registry.discard(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

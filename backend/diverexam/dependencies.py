from fastapi import Depends, HTTPException, Request, status
from uuid import UUID

from .config import Settings
from .schemas.question_schema import ExamMode
from .services.attempt_sink import HttpAttemptSink
from .services.question_provider import HttpQuestionProvider, RoutingQuestionProvider, StaticQuestionProvider
from .services.session_registry import SessionRegistry
from .services.session_service import ExamSession
from .services.timer_service import AsyncioTicker
from .services.voice_service import TranscriptRelay, UnsupportedVoiceCapture


def build_registry(settings: Settings) -> SessionRegistry:
    provider = RoutingQuestionProvider(
        static=StaticQuestionProvider.from_json_file(settings.QUESTION_BANK_PATH),
        remote=HttpQuestionProvider(settings.API_BASE_URL, settings.HTTP_TIMEOUT_SECONDS),
        remote_identifiers=[settings.REMOTE_EXAM_SLUG],
    )
    sink = HttpAttemptSink(settings.API_BASE_URL, settings.HTTP_TIMEOUT_SECONDS)
    voice_factory = TranscriptRelay if settings.VOICE_INPUT_ENABLED else UnsupportedVoiceCapture
    return SessionRegistry(
        provider,
        sink,
        ticker_factory=lambda: AsyncioTicker(settings.TICK_SECONDS),
        voice_factory=voice_factory,
        user_id=settings.DEFAULT_USER_ID,
        retention_seconds=settings.SESSION_RETENTION_SECONDS,
    )


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def parse_mode(mode: str = "full") -> ExamMode:
    try:
        return ExamMode(mode.lower())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="mode must be 'full' or 'srs'")


def get_exam_session(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> ExamSession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session

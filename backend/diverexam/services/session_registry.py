import logging
import random
import time
from typing import Callable, Dict, List, Optional
from uuid import UUID

from ..schemas.question_schema import ExamMode
from .attempt_sink import AttemptSink
from .question_provider import QuestionProvider
from .question_set_service import resolve_question_set
from .session_service import DEFAULT_USER_ID, ExamSession
from .timer_service import Ticker
from .voice_service import VoiceCapture

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Active sessions of the web host, keyed by session id. Sessions share nothing."""

    def __init__(
        self,
        provider: QuestionProvider,
        sink: AttemptSink,
        ticker_factory: Callable[[], Ticker],
        voice_factory: Callable[[], VoiceCapture],
        user_id: str = DEFAULT_USER_ID,
        rng: Optional[random.Random] = None,
        retention_seconds: float = 900.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.sink = sink
        self.ticker_factory = ticker_factory
        self.voice_factory = voice_factory
        self.user_id = user_id
        self.rng = rng
        # how long a submitted session stays readable before it is dropped
        self.retention_seconds = retention_seconds
        self.clock = clock
        self._sessions: Dict[UUID, ExamSession] = {}

    async def create(self, exam_identifier: str, mode: ExamMode) -> ExamSession:
        """
        Resolve the question set and start a session.

        A session without questions is returned unregistered and never started;
        callers check ``is_not_found``.
        """
        self.prune()
        questions = await resolve_question_set(self.provider, exam_identifier, mode, rng=self.rng)
        session = ExamSession(
            exam_identifier,
            mode,
            questions,
            sink=self.sink,
            ticker=self.ticker_factory(),
            voice=self.voice_factory(),
            user_id=self.user_id,
            clock=self.clock,
        )
        if session.is_not_found:
            return session
        self._sessions[session.id] = session
        session.start()
        return session

    def get(self, session_id: UUID) -> Optional[ExamSession]:
        self.prune()
        return self._sessions.get(session_id)

    def prune(self) -> int:
        """Discard submitted sessions older than the retention window, including ones the timer submitted."""
        now = self.clock()
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.submitted_at is not None and now - session.submitted_at >= self.retention_seconds
        ]
        for session_id in expired:
            self.discard(session_id)
        if expired:
            logger.info("Dropped %d finished exam sessions", len(expired))
        return len(expired)

    def discard(self, session_id: UUID) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def active_ids(self) -> List[UUID]:
        return list(self._sessions.keys())

    def close_all(self) -> None:
        for session_id in list(self._sessions.keys()):
            self.discard(session_id)
        logger.info("Closed all exam sessions")

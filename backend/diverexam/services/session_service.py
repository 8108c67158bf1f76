"""
The exam session engine.

One ``ExamSession`` per attempt. It owns navigation, answer capture, the
countdown and submission; timer ticks, the attempt sink and dictation are
injected so the whole lifecycle can be driven without wall-clock time.

    IDLE --start--> RUNNING --tick--> RUNNING
                    RUNNING --tick, clock at 0--> EXPIRED --> SUBMITTED
                    RUNNING --submit--> SUBMITTED
"""
import logging
import time
from typing import Callable, Dict, List, Optional, Sequence
from uuid import UUID, uuid4

from ..models.exam_session_model import ExamSessionStatus, SessionState
from ..schemas.exam_schema import ExamConfiguration
from ..schemas.exam_session_schema import AttemptSummary, ReviewItem
from ..schemas.question_schema import ExamMode, Question, QuestionKind
from .attempt_sink import AttemptSink
from .exam_config_service import resolve_exam_configuration
from .grading_service import build_attempt_summary, build_review
from .timer_service import AsyncioTicker, Ticker
from .voice_service import VOICE_UNSUPPORTED_NOTICE, UnsupportedVoiceCapture, VoiceCapture

logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "current-user"
LOW_TIME_THRESHOLD_SECONDS = 600


def format_clock(seconds: int) -> str:
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class ExamSession:
    def __init__(
        self,
        exam_identifier: str,
        mode: ExamMode,
        questions: Sequence[Question],
        *,
        sink: AttemptSink,
        ticker: Optional[Ticker] = None,
        voice: Optional[VoiceCapture] = None,
        user_id: str = DEFAULT_USER_ID,
        session_id: Optional[UUID] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.id: UUID = session_id or uuid4()
        self.exam_identifier = exam_identifier
        self.mode = mode
        self.configuration: ExamConfiguration = resolve_exam_configuration(exam_identifier, mode)
        self.questions: List[Question] = list(questions)
        self.user_id = user_id
        self.state = SessionState(remaining_seconds=self.configuration.time_limit_seconds)
        self.summary: Optional[AttemptSummary] = None
        self.voice: VoiceCapture = voice or UnsupportedVoiceCapture()
        self._sink = sink
        self._ticker: Ticker = ticker or AsyncioTicker()
        self._closed = False
        self._clock = clock
        # clock reading at submission, used to expire finished sessions
        self.submitted_at: Optional[float] = None

    # -- read side -------------------------------------------------------

    @property
    def status(self) -> ExamSessionStatus:
        return self.state.status

    @property
    def is_submitted(self) -> bool:
        return self.state.is_submitted

    @property
    def is_not_found(self) -> bool:
        # zero resolved questions means the exam does not exist, not a zero score
        return len(self.questions) == 0

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def answers(self) -> Dict[str, str]:
        return dict(self.state.answers)

    @property
    def remaining_seconds(self) -> int:
        return self.state.remaining_seconds

    @property
    def is_recording_voice(self) -> bool:
        return self.state.is_recording_voice

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_not_found:
            return None
        return self.questions[self.state.current_index]

    @property
    def clock(self) -> str:
        return format_clock(self.state.remaining_seconds)

    @property
    def progress_percentage(self) -> float:
        if self.is_not_found:
            return 0.0
        return (self.state.current_index + 1) / len(self.questions) * 100

    @property
    def answered_count(self) -> int:
        return len(self.state.answers)

    @property
    def time_is_low(self) -> bool:
        return self.state.remaining_seconds < LOW_TIME_THRESHOLD_SECONDS

    def has_question(self, question_id: str) -> bool:
        return any(q.id == question_id for q in self.questions)

    def review(self) -> List[ReviewItem]:
        return build_review(self.state.answers, self.questions)

    # -- lifecycle -------------------------------------------------------

    def start(self) -> None:
        if self.is_not_found:
            logger.warning("Not starting session %s: no questions for exam slug=%s", self.id, self.exam_identifier)
            return
        if self.state.status != ExamSessionStatus.IDLE or self._closed:
            return
        self.state.status = ExamSessionStatus.RUNNING
        self._ticker.start(self.tick)
        logger.info("Session %s started for exam slug=%s mode=%s with %d questions, %ss on the clock",
                    self.id, self.exam_identifier, self.mode.value, len(self.questions), self.state.remaining_seconds)

    async def tick(self) -> None:
        # a tick scheduled before submission or teardown must not touch the state
        if self._closed or self.state.status != ExamSessionStatus.RUNNING:
            return
        self.state.remaining_seconds = max(0, self.state.remaining_seconds - 1)
        if self.state.remaining_seconds == 0:
            self.state.status = ExamSessionStatus.EXPIRED
            logger.info("Session %s ran out of time, submitting", self.id)
            await self.submit()

    async def submit(self) -> AttemptSummary:
        """
        Grade the session and hand the summary to the attempt sink.

        Runs once; later calls return the first summary. The session is
        SUBMITTED and the summary available before the sink is called, and a
        failing sink is only logged.
        """
        if self.state.is_submitted:
            return self.summary
        self.state.status = ExamSessionStatus.SUBMITTED
        self.submitted_at = self._clock()
        self._ticker.cancel()
        self._stop_voice()

        summary = build_attempt_summary(self.exam_identifier, self.state.answers, self.questions)
        self.summary = summary
        logger.info("Session %s submitted: %d/%d (%d%%, pass mark %d%%, passed=%s)",
                    self.id, summary.score, summary.total_questions, summary.percentage,
                    summary.passing_percentage, summary.passed)

        try:
            await self._sink.record_attempt(summary, self.user_id)
        except Exception as e:
            logger.warning("Failed to persist exam attempt for session %s exam slug=%s: %s",
                           self.id, self.exam_identifier, e)
        return summary

    def close(self) -> None:
        """Tear the session down. Pending ticks are cancelled; an in-flight submission is left alone."""
        if self._closed:
            return
        self._closed = True
        # once submission has begun the ticker is already stopped; cancelling its
        # task here would abort the sink call running inside it
        if self.state.status in (ExamSessionStatus.IDLE, ExamSessionStatus.RUNNING):
            self._ticker.cancel()
        self._stop_voice()
        logger.debug("Session %s closed in status %s", self.id, self.state.status.value)

    # -- answers & navigation ---------------------------------------------

    def set_answer(self, question_id: str, value: str) -> bool:
        # any string is accepted, choices are constrained by the client
        if self.state.is_submitted or self._closed:
            logger.warning("Ignoring answer for question %s on finished session %s", question_id, self.id)
            return False
        self.state.answers[question_id] = value
        return True

    def set_current_answer(self, value: str) -> bool:
        question = self.current_question
        if question is None:
            return False
        return self.set_answer(question.id, value)

    def go_next(self) -> int:
        if self.state.current_index < len(self.questions) - 1:
            self._stop_voice()
            self.state.current_index += 1
        return self.state.current_index

    def go_previous(self) -> int:
        if self.state.current_index > 0:
            self._stop_voice()
            self.state.current_index -= 1
        return self.state.current_index

    # -- dictation -------------------------------------------------------

    def toggle_recording(self) -> Optional[str]:
        """
        Start or stop dictation for the current written question.

        Returns a notice for the learner when dictation cannot be used,
        None otherwise.
        """
        if self.state.is_recording_voice:
            self._stop_voice()
            return None

        question = self.current_question
        if question is None or question.kind != QuestionKind.written or self.state.is_submitted or self._closed:
            return None

        if not self.voice.is_supported():
            logger.warning("Speech recognition unavailable for session %s", self.id)
            return VOICE_UNSUPPORTED_NOTICE

        target_id = question.id
        try:
            self.voice.start(
                on_result=lambda text, is_final: self._on_transcript(target_id, text, is_final),
                on_end=self._on_voice_end,
            )
        except Exception as e:
            logger.warning("Speech recognition failed to start for session %s: %s", self.id, e)
            self.state.is_recording_voice = False
            return VOICE_UNSUPPORTED_NOTICE

        self.state.is_recording_voice = True
        return None

    def _on_transcript(self, question_id: str, text: str, is_final: bool) -> None:
        # interim segments are display-only
        if not is_final or not text:
            return
        if self.state.is_submitted or self._closed:
            return
        self.state.answers[question_id] = self.state.answers.get(question_id, "") + text

    def _on_voice_end(self) -> None:
        self.state.is_recording_voice = False

    def _stop_voice(self) -> None:
        if not self.state.is_recording_voice:
            return
        self.state.is_recording_voice = False
        try:
            self.voice.stop()
        except Exception as e:
            logger.warning("Speech recognition failed to stop cleanly for session %s: %s", self.id, e)

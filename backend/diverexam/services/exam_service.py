from typing import Optional

from ..schemas.exam_session_schema import QuestionView, SessionResult, SessionView
from ..schemas.question_schema import Question
from .session_service import ExamSession


def _sanitize_question(q: Optional[Question]) -> Optional[QuestionView]:
    # remove the answer key so a running exam cannot leak it
    if q is None:
        return None
    return QuestionView(
        id=q.id,
        kind=q.kind,
        prompt=q.prompt,
        options=list(q.options),
        points=q.points,
        sequence=q.sequence,
    )


def _session_to_view(session: ExamSession) -> SessionView:
    return SessionView(
        id=session.id,
        exam_identifier=session.exam_identifier,
        mode=session.mode,
        title=session.configuration.title,
        status=session.status.value,
        current_index=session.current_index,
        total_questions=len(session.questions),
        current_question=_sanitize_question(session.current_question),
        answers=session.answers,
        remaining_seconds=session.remaining_seconds,
        clock=session.clock,
        progress_percentage=session.progress_percentage,
        answered_count=session.answered_count,
        time_is_low=session.time_is_low,
        is_recording_voice=session.is_recording_voice,
        advisory_note=session.configuration.advisory_note,
    )


def _session_result(session: ExamSession) -> SessionResult:
    return SessionResult(
        id=session.id,
        status=session.status.value,
        summary=session.summary,
        review=session.review(),
    )

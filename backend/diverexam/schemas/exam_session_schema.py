from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, List
from uuid import UUID
import json

from .question_schema import ExamMode, QuestionKind


class AttemptSummary(BaseModel):
    """Result of auto-grading one submitted session."""
    model_config = ConfigDict(frozen=True)

    exam_identifier: str
    score: int
    total_questions: int
    percentage: int
    passed: bool
    passing_percentage: int
    raw_answers: Dict[str, str] = {}

    def to_sink_payload(self, user_id: str) -> dict:
        # body of POST /api/exam-attempts; answers travel JSON-encoded
        return {
            "userId": user_id,
            "examSlug": self.exam_identifier,
            "score": self.score,
            "totalQuestions": self.total_questions,
            "percentage": self.percentage,
            "passed": self.passed,
            "passingScore": self.passing_percentage,
            "answers": json.dumps(self.raw_answers),
        }


class ReviewItem(BaseModel):
    question_id: str
    kind: QuestionKind
    prompt: str
    points: int
    answer: Optional[str] = None
    explanation: Optional[str] = None
    correct_answer: Optional[str] = None
    # None when the question is excluded from grading
    is_correct: Optional[bool] = None


class QuestionView(BaseModel):
    """A question as shown while the exam is running (no answer key)."""
    id: str
    kind: QuestionKind
    prompt: str
    options: List[str] = []
    points: int
    sequence: int


class SessionView(BaseModel):
    id: UUID
    exam_identifier: str
    mode: ExamMode
    title: str
    status: str
    current_index: int
    total_questions: int
    current_question: Optional[QuestionView] = None
    answers: Dict[str, str] = {}
    remaining_seconds: int
    clock: str
    progress_percentage: float
    answered_count: int
    time_is_low: bool
    is_recording_voice: bool
    advisory_note: Optional[str] = None


class AnswerPayload(BaseModel):
    value: str


class TranscriptPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    is_final: bool = Field(False, alias="isFinal")


class VoiceToggleResult(BaseModel):
    is_recording_voice: bool
    notice: Optional[str] = None


class SessionResult(BaseModel):
    id: UUID
    status: str
    summary: AttemptSummary
    review: List[ReviewItem] = []

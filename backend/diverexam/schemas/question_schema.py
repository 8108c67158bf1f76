from pydantic import BaseModel, ConfigDict, Field, validator
from typing import List, Optional
import enum


class QuestionKind(str, enum.Enum):
    """Enums for valid question kinds."""
    multiple_choice = "MULTIPLE_CHOICE"
    written = "WRITTEN"
    true_false = "TRUE_FALSE"


class ExamMode(str, enum.Enum):
    full = "full"
    spaced_repetition = "srs"


class Question(BaseModel):
    """
    One assessable item of a question bank.

    Field names follow the JSON served by the question endpoint
    (``correctAnswer``); python code may use the snake_case names.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1, description="Stable identifier, unique within a question set.")
    kind: QuestionKind = Field(..., description="MULTIPLE_CHOICE, WRITTEN or TRUE_FALSE.")
    prompt: str = Field(..., description="Display text of the question.")
    options: List[str] = Field(default_factory=list, description="Ordered choices for choice-based questions.")
    correct_answer: Optional[str] = Field(None, alias="correctAnswer")
    explanation: Optional[str] = None
    # weight is displayed but not used for percentage scoring
    points: int = Field(1, gt=0)
    sequence: int = Field(0, description="Position used for stable ordering.")

    @validator("options", pre=True, always=True)
    def options_default_to_empty(cls, v):
        return v or []

    @validator("correct_answer", always=True)
    def written_questions_have_no_key(cls, v, values):
        # written answers are free text and never auto-graded
        if values.get("kind") == QuestionKind.written:
            return None
        return v

    @property
    def is_gradable(self) -> bool:
        return self.kind != QuestionKind.written and isinstance(self.correct_answer, str) and len(self.correct_answer) > 0


class QuestionBankResponse(BaseModel):
    """Body of ``GET /api/exams/{identifier}/questions``."""
    questions: List[Question] = Field(default_factory=list)

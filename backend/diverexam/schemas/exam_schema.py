from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

from .question_schema import ExamMode


class ExamConfiguration(BaseModel):
    """Resolved, read-only parameters of one exam in one mode."""
    model_config = ConfigDict(frozen=True)

    exam_identifier: str
    mode: ExamMode
    title: str
    time_limit_seconds: int = Field(..., gt=0)
    passing_percentage: int = Field(..., ge=0, le=100)
    # display-only; grading checks the overall percentage alone
    advisory_note: Optional[str] = None


class ExamCatalogEntry(BaseModel):
    exam_identifier: str
    title: str
    passing_percentage: int
    full_time_limit_seconds: int
    srs_time_limit_seconds: int
    advisory_note: Optional[str] = None


class ExamCatalog(BaseModel):
    exams: List[ExamCatalogEntry] = []

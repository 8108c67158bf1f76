from dataclasses import dataclass, field
from typing import Dict
import enum


class ExamSessionStatus(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    # transient: the clock hit zero and submission is under way
    EXPIRED = "expired"
    SUBMITTED = "submitted"


@dataclass
class SessionState:
    """Mutable runtime state of one exam attempt. Never persisted."""
    remaining_seconds: int
    current_index: int = 0
    answers: Dict[str, str] = field(default_factory=dict)
    status: ExamSessionStatus = ExamSessionStatus.IDLE
    is_recording_voice: bool = False

    @property
    def is_submitted(self) -> bool:
        return self.status == ExamSessionStatus.SUBMITTED

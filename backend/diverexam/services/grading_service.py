from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

from ..schemas.exam_session_schema import AttemptSummary, ReviewItem
from ..schemas.question_schema import Question
from .exam_config_service import resolve_passing_percentage


def _normalize(value: str) -> str:
    return value.strip().lower()


def is_answer_correct(answer: Optional[str], question: Question) -> Optional[bool]:
    """True/False for gradable questions, None for questions excluded from scoring."""
    if not question.is_gradable:
        return None
    if answer is None:
        return False
    return _normalize(answer) == _normalize(question.correct_answer)


def round_percentage(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    # half-up, not python's banker's rounding
    ratio = Decimal(correct * 100) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def grade_submission(answers: Dict[str, str], questions: Sequence[Question]) -> Tuple[int, int, int]:
    """
    Grade the captured answers against the question set.
    - answers: mapping question id -> learner's answer string
    - questions: the resolved question set of the session

    Only questions with a non-empty answer key that are not WRITTEN count;
    everything else stays out of the denominator.
    Returns (correct, total_gradable, percentage).
    """
    gradable = [q for q in questions if q.is_gradable]
    correct = sum(1 for q in gradable if is_answer_correct(answers.get(q.id), q))
    return correct, len(gradable), round_percentage(correct, len(gradable))


def build_attempt_summary(exam_identifier: str, answers: Dict[str, str],
                          questions: Sequence[Question]) -> AttemptSummary:
    correct, total, percentage = grade_submission(answers, questions)
    passing_percentage = resolve_passing_percentage(exam_identifier)
    return AttemptSummary(
        exam_identifier=exam_identifier,
        score=correct,
        total_questions=total,
        percentage=percentage,
        passed=percentage >= passing_percentage,
        passing_percentage=passing_percentage,
        raw_answers=dict(answers),
    )


def build_review(answers: Dict[str, str], questions: Sequence[Question]) -> List[ReviewItem]:
    return [
        ReviewItem(
            question_id=q.id,
            kind=q.kind,
            prompt=q.prompt,
            points=q.points,
            answer=answers.get(q.id),
            explanation=q.explanation,
            correct_answer=q.correct_answer,
            is_correct=is_answer_correct(answers.get(q.id), q),
        )
        for q in questions
    ]

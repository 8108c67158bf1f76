import logging
import random
from typing import List, Optional, Sequence

from ..schemas.question_schema import ExamMode, Question
from .exam_config_service import SRS_QUESTION_COUNT
from .question_provider import QuestionProvider

logger = logging.getLogger(__name__)


def expand_questions_to_count(questions: Sequence[Question], target_count: int,
                              rng: Optional[random.Random] = None) -> List[Question]:
    """
    Return exactly ``target_count`` questions taken from ``questions``.

    - Bank at least as large as the target: first ``target_count`` in stored order, no shuffle.
    - Smaller, non-empty bank: cycle from the start adding copies with ids
      ``<id>-dup-<round>`` and a 1-based ``sequence`` equal to their position,
      then shuffle the whole padded list.
    - Empty bank: empty list.
    """
    if not questions:
        return []
    if len(questions) >= target_count:
        return list(questions[:target_count])

    expanded: List[Question] = list(questions)
    used_ids = {q.id for q in expanded}
    source_index = 0
    while len(expanded) < target_count:
        question = questions[source_index % len(questions)]
        dup_round = len(expanded) // len(questions)
        # a bank may already hold an id shaped like a padding copy
        while f"{question.id}-dup-{dup_round}" in used_ids:
            dup_round += 1
        used_ids.add(f"{question.id}-dup-{dup_round}")
        expanded.append(question.model_copy(update={
            "id": f"{question.id}-dup-{dup_round}",
            "sequence": len(expanded) + 1,
        }))
        source_index += 1

    (rng or random).shuffle(expanded)
    return expanded


def unique_by_id(bank: Sequence[Question]) -> List[Question]:
    """Drop questions whose id already appeared earlier in the bank."""
    seen = set()
    unique: List[Question] = []
    for question in bank:
        if question.id in seen:
            logger.warning("Dropping repeated question id=%s", question.id)
            continue
        seen.add(question.id)
        unique.append(question)
    return unique


def derive_question_set(bank: Sequence[Question], mode: ExamMode,
                        rng: Optional[random.Random] = None) -> List[Question]:
    bank = unique_by_id(bank)
    if mode == ExamMode.spaced_repetition:
        return expand_questions_to_count(bank, SRS_QUESTION_COUNT, rng=rng)
    # full mode: the whole bank, stored order
    return bank


async def resolve_question_set(provider: QuestionProvider, exam_identifier: str, mode: ExamMode,
                               rng: Optional[random.Random] = None) -> List[Question]:
    bank = await provider.get_questions(exam_identifier)
    if not bank:
        logger.warning("No questions found for exam slug=%s", exam_identifier)
        return []
    questions = derive_question_set(bank, mode, rng=rng)
    logger.info("Resolved %d questions for exam slug=%s mode=%s (bank size %d)",
                len(questions), exam_identifier, mode.value, len(bank))
    return questions

import random
import re
from collections import Counter

import pytest

from diverexam.schemas.question_schema import ExamMode, Question
from diverexam.services.question_set_service import (
    derive_question_set,
    expand_questions_to_count,
    resolve_question_set,
)


def make_bank(size, prefix="q"):
    return [
        Question(
            id=f"{prefix}-{i}",
            kind="MULTIPLE_CHOICE",
            prompt=f"Question {i}",
            options=["A", "B"],
            correctAnswer="A",
            sequence=i,
        )
        for i in range(1, size + 1)
    ]


class FakeProvider:
    def __init__(self, banks):
        self.banks = banks
        self.calls = []

    async def get_questions(self, exam_identifier):
        self.calls.append(exam_identifier)
        return list(self.banks.get(exam_identifier, []))


def test_full_mode_returns_whole_bank_in_order():
    bank = make_bank(75)
    first = derive_question_set(bank, ExamMode.full)
    second = derive_question_set(bank, ExamMode.full)
    assert [q.id for q in first] == [q.id for q in bank]
    assert [q.id for q in second] == [q.id for q in first]


@pytest.mark.parametrize("size", [1, 4, 5, 14, 15, 16, 75])
def test_srs_always_has_fifteen_questions(size):
    questions = derive_question_set(make_bank(size), ExamMode.spaced_repetition)
    assert len(questions) == 15
    assert len({q.id for q in questions}) == 15


def test_srs_large_bank_takes_first_fifteen_without_shuffle():
    bank = make_bank(75)
    rng = random.Random(7)
    questions = expand_questions_to_count(bank, 15, rng=rng)
    assert [q.id for q in questions] == [f"q-{i}" for i in range(1, 16)]


def test_srs_padding_reuses_bank_cyclically():
    bank = make_bank(4)
    questions = expand_questions_to_count(bank, 15, rng=random.Random(1))

    base_counts = Counter(q.id.split("-dup-")[0] for q in questions)
    assert set(base_counts) == {"q-1", "q-2", "q-3", "q-4"}
    assert all(count >= 3 for count in base_counts.values())

    dups = [q for q in questions if "-dup-" in q.id]
    assert len(dups) == 11
    assert all(re.fullmatch(r"q-\d+-dup-\d+", q.id) for q in dups)
    # copies are numbered by their position before the shuffle
    assert sorted(q.sequence for q in dups) == list(range(5, 16))
    assert {q.id for q in dups if q.id.endswith("-dup-3")} == {"q-1-dup-3", "q-2-dup-3", "q-3-dup-3"}


def test_srs_padding_is_shuffled():
    bank = make_bank(5)
    orders = {
        tuple(q.id for q in expand_questions_to_count(bank, 15, rng=random.Random(seed)))
        for seed in range(10)
    }
    assert len(orders) > 1


def test_empty_bank_yields_empty_set():
    assert expand_questions_to_count([], 15) == []
    assert derive_question_set([], ExamMode.full) == []


@pytest.mark.anyio
async def test_resolve_question_set_uses_provider():
    provider = FakeProvider({"lst": make_bank(3)})
    questions = await resolve_question_set(provider, "lst", ExamMode.spaced_repetition, rng=random.Random(3))
    assert len(questions) == 15
    assert provider.calls == ["lst"]


@pytest.mark.anyio
async def test_resolve_unknown_exam_is_empty():
    provider = FakeProvider({})
    assert await resolve_question_set(provider, "nope", ExamMode.spaced_repetition) == []
    assert await resolve_question_set(provider, "nope", ExamMode.full) == []


def test_repeated_ids_are_dropped_keeping_the_first():
    bank = make_bank(3)
    repeat = bank[0].model_copy(update={"prompt": "Same id, other text"})
    questions = derive_question_set(bank + [repeat], ExamMode.full)
    assert [q.id for q in questions] == ["q-1", "q-2", "q-3"]
    assert questions[0].prompt == "Question 1"


def test_padding_ids_do_not_collide_with_bank_ids():
    bank = make_bank(1)
    bank.append(bank[0].model_copy(update={"id": "q-1-dup-1", "sequence": 2}))
    questions = derive_question_set(bank, ExamMode.spaced_repetition, rng=random.Random(3))
    ids = [q.id for q in questions]
    assert len(ids) == 15
    assert len(set(ids)) == 15
    assert {"q-1", "q-1-dup-1"} <= set(ids)

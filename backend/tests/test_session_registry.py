import pytest

from diverexam.models.exam_session_model import ExamSessionStatus
from diverexam.schemas.question_schema import ExamMode, Question
from diverexam.services.question_provider import StaticQuestionProvider
from diverexam.services.session_registry import SessionRegistry
from diverexam.services.voice_service import TranscriptRelay


class FakeTicker:
    def start(self, on_tick):
        self.on_tick = on_tick

    def cancel(self):
        pass


class FakeSink:
    def __init__(self):
        self.recorded = []

    async def record_attempt(self, summary, user_id):
        self.recorded.append(summary)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_registry(clock, retention_seconds=60):
    bank = [Question(id="tf", kind="TRUE_FALSE", prompt="tf", options=["True", "False"], correctAnswer="True")]
    return SessionRegistry(
        StaticQuestionProvider({"lst": bank}),
        FakeSink(),
        ticker_factory=FakeTicker,
        voice_factory=TranscriptRelay,
        retention_seconds=retention_seconds,
        clock=clock,
    )


@pytest.mark.anyio
async def test_submitted_sessions_are_dropped_after_retention():
    clock = FakeClock()
    registry = make_registry(clock)
    finished = await registry.create("lst", ExamMode.full)
    running = await registry.create("lst", ExamMode.full)
    await finished.submit()

    clock.now += 30
    assert registry.get(finished.id) is finished

    clock.now += 30
    assert registry.get(finished.id) is None
    assert registry.get(running.id) is running
    assert running.status == ExamSessionStatus.RUNNING


@pytest.mark.anyio
async def test_create_prunes_finished_sessions():
    clock = FakeClock()
    registry = make_registry(clock, retention_seconds=0)
    for _ in range(20):
        session = await registry.create("lst", ExamMode.full)
        await session.submit()
    assert len(registry.active_ids()) == 1
    assert registry.prune() == 1
    assert registry.active_ids() == []


@pytest.mark.anyio
async def test_unknown_exam_is_not_registered():
    registry = make_registry(FakeClock())
    session = await registry.create("no-such-exam", ExamMode.full)
    assert session.is_not_found
    assert registry.active_ids() == []

import json

import httpx
import pytest

from diverexam.config import settings
from diverexam.schemas.exam_session_schema import AttemptSummary
from diverexam.schemas.question_schema import Question
from diverexam.services.attempt_sink import HttpAttemptSink
from diverexam.services.exam_config_service import known_exam_identifiers
from diverexam.services.question_provider import (
    HttpQuestionProvider,
    RoutingQuestionProvider,
    StaticQuestionProvider,
)

QUESTION_JSON = {
    "id": "cr-1",
    "kind": "TRUE_FALSE",
    "prompt": "The client representative signs off the dive plan.",
    "options": ["True", "False"],
    "correctAnswer": "True",
    "points": 2,
    "sequence": 1,
}


def client_for(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_http_provider_parses_questions():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json={"questions": [QUESTION_JSON]})

    async with client_for(handler) as client:
        provider = HttpQuestionProvider("http://exams.test/", client=client)
        questions = await provider.get_questions("client-representative")

    assert seen == ["/api/exams/client-representative/questions"]
    assert [q.id for q in questions] == ["cr-1"]
    assert questions[0].correct_answer == "True"


@pytest.mark.anyio
@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": "boom"}),
    httpx.Response(404),
    httpx.Response(200, content=b"<html>not json</html>"),
    httpx.Response(200, json={"questions": [{"id": "x"}]}),
])
async def test_http_provider_bad_responses_are_empty(response):
    async with client_for(lambda request: response) as client:
        provider = HttpQuestionProvider("http://exams.test", client=client)
        assert await provider.get_questions("client-representative") == []


@pytest.mark.anyio
async def test_http_provider_network_error_is_empty():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async with client_for(handler) as client:
        provider = HttpQuestionProvider("http://exams.test", client=client)
        assert await provider.get_questions("client-representative") == []


@pytest.mark.anyio
async def test_static_provider_resolves_aliases():
    bank = [Question.model_validate(QUESTION_JSON)]
    provider = StaticQuestionProvider({"alst": bank}, {"saturation-diving": "alst"})
    assert await provider.get_questions("saturation-diving") == bank
    assert await provider.get_questions("alst") == bank
    assert await provider.get_questions("unknown") == []

    bundled = StaticQuestionProvider.from_json_file(settings.QUESTION_BANK_PATH)
    assert await bundled.get_questions("saturation-diving") == await bundled.get_questions("alst")
    assert await bundled.get_questions("underwater-welding") == await bundled.get_questions("lst")
    assert len(await bundled.get_questions("saturation-diving")) > 0
    assert len(await bundled.get_questions("underwater-welding")) > 0


@pytest.mark.anyio
async def test_bundled_content_covers_every_static_exam():
    provider = StaticQuestionProvider.from_json_file(settings.QUESTION_BANK_PATH)
    for slug in known_exam_identifiers():
        if slug == settings.REMOTE_EXAM_SLUG:
            continue
        questions = await provider.get_questions(slug)
        assert questions, slug
        assert len({q.id for q in questions}) == len(questions), slug


@pytest.mark.anyio
async def test_bundled_content_loads():
    provider = StaticQuestionProvider.from_json_file(settings.QUESTION_BANK_PATH)
    questions = await provider.get_questions("hyperbaric-operations")
    assert [q.id for q in questions] == ["hbo-1", "hbo-2", "hbo-3", "hbo-4", "hbo-5"]
    assert questions[1].correct_answer is None


@pytest.mark.anyio
async def test_routing_provider_sends_one_exam_remote():
    class Named:
        def __init__(self, name):
            self.name = name
            self.calls = []

        async def get_questions(self, exam_identifier):
            self.calls.append(exam_identifier)
            return []

    static, remote = Named("static"), Named("remote")
    provider = RoutingQuestionProvider(static, remote, ["client-representative"])
    await provider.get_questions("client-representative")
    await provider.get_questions("lst")
    assert remote.calls == ["client-representative"]
    assert static.calls == ["lst"]


@pytest.mark.anyio
async def test_http_sink_posts_attempt():
    bodies = []

    def handler(request):
        bodies.append((request.url.path, json.loads(request.content)))
        return httpx.Response(201, json={"ok": True})

    summary = AttemptSummary(exam_identifier="lst", score=3, total_questions=4, percentage=75,
                             passed=False, passing_percentage=80, raw_answers={"a": "True"})
    async with client_for(handler) as client:
        await HttpAttemptSink("http://exams.test", client=client).record_attempt(summary, "u-1")

    path, body = bodies[0]
    assert path == "/api/exam-attempts"
    assert body["examSlug"] == "lst"
    assert body["passed"] is False
    assert json.loads(body["answers"]) == {"a": "True"}


@pytest.mark.anyio
async def test_http_sink_raises_on_server_error():
    summary = AttemptSummary(exam_identifier="lst", score=0, total_questions=0, percentage=0,
                             passed=False, passing_percentage=80)
    async with client_for(lambda request: httpx.Response(503)) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await HttpAttemptSink("http://exams.test", client=client).record_attempt(summary, "u-1")

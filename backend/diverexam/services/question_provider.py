"""
Question providers.

A provider turns an exam identifier into the stored, ordered question bank.
``StaticQuestionProvider`` serves the bundled content file,
``HttpQuestionProvider`` fetches from ``GET /api/exams/{identifier}/questions``
and ``RoutingQuestionProvider`` picks one of them per identifier.
Providers never raise on a miss: unknown identifiers and failed fetches
both resolve to an empty list.
"""
import json
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

import httpx
from pydantic import ValidationError

from ..schemas.question_schema import Question, QuestionBankResponse

logger = logging.getLogger(__name__)


class QuestionProvider(Protocol):
    async def get_questions(self, exam_identifier: str) -> List[Question]:
        ...


class StaticQuestionProvider:
    def __init__(self, banks: Mapping[str, List[Question]], aliases: Optional[Mapping[str, str]] = None):
        self._banks: Dict[str, List[Question]] = {k: list(v) for k, v in banks.items()}
        # several exam slugs share one content bank
        self._aliases: Dict[str, str] = dict(aliases or {})

    @classmethod
    def from_json_file(cls, path: str) -> "StaticQuestionProvider":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        banks = {
            key: [Question.model_validate(q) for q in questions]
            for key, questions in (data.get("banks") or {}).items()
        }
        provider = cls(banks, data.get("aliases") or {})
        logger.info("Loaded %d question banks from %s", len(banks), path)
        return provider

    def bank_key(self, exam_identifier: str) -> str:
        return self._aliases.get(exam_identifier, exam_identifier)

    async def get_questions(self, exam_identifier: str) -> List[Question]:
        bank = self._banks.get(self.bank_key(exam_identifier))
        if not bank:
            logger.warning("No question bank for exam slug=%s", exam_identifier)
            return []
        return list(bank)


class HttpQuestionProvider:
    def __init__(self, base_url: str, timeout_seconds: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, timeout=self.timeout_seconds)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.get(url)

    async def get_questions(self, exam_identifier: str) -> List[Question]:
        url = f"{self.base_url}/api/exams/{exam_identifier}/questions"
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            logger.warning("Question fetch failed for exam slug=%s: %s", exam_identifier, e)
            return []

        if response.status_code != 200:
            logger.warning("Question fetch for exam slug=%s returned HTTP %s", exam_identifier, response.status_code)
            return []

        try:
            body = QuestionBankResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Malformed question payload for exam slug=%s: %s", exam_identifier, e)
            return []
        return list(body.questions)


class RoutingQuestionProvider:
    def __init__(self, static: QuestionProvider, remote: QuestionProvider, remote_identifiers: Iterable[str]):
        self.static = static
        self.remote = remote
        self.remote_identifiers = frozenset(remote_identifiers)

    def provider_for(self, exam_identifier: str) -> QuestionProvider:
        if exam_identifier in self.remote_identifiers:
            return self.remote
        return self.static

    async def get_questions(self, exam_identifier: str) -> List[Question]:
        return await self.provider_for(exam_identifier).get_questions(exam_identifier)

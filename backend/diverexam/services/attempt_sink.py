import logging
from typing import Optional, Protocol

import httpx

from ..schemas.exam_session_schema import AttemptSummary

logger = logging.getLogger(__name__)


class AttemptSink(Protocol):
    async def record_attempt(self, summary: AttemptSummary, user_id: str) -> None:
        ...


class HttpAttemptSink:
    """Posts finished attempts to ``POST /api/exam-attempts``. Errors propagate to the caller."""

    def __init__(self, base_url: str, timeout_seconds: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def record_attempt(self, summary: AttemptSummary, user_id: str) -> None:
        url = f"{self.base_url}/api/exam-attempts"
        payload = summary.to_sink_payload(user_id)
        if self._client is not None:
            response = await self._client.post(url, json=payload, timeout=self.timeout_seconds)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, json=payload)
        response.raise_for_status()
        logger.info("Recorded attempt for exam slug=%s user=%s", summary.exam_identifier, user_id)

"""
Dictation capability for written answers.

The engine only sees the small ``VoiceCapture`` contract. Hosts without speech
recognition use ``UnsupportedVoiceCapture``; the web host relays transcripts
recognised in the browser through ``TranscriptRelay``.
"""
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, bool], None]
EndCallback = Callable[[], None]

VOICE_UNSUPPORTED_NOTICE = "Speech recognition is not supported here. Please type your answer manually."


class VoiceCaptureError(Exception):
    pass


class VoiceCapture(Protocol):
    def is_supported(self) -> bool:
        ...

    def start(self, on_result: ResultCallback, on_end: EndCallback) -> None:
        ...

    def stop(self) -> None:
        ...


class UnsupportedVoiceCapture:
    def is_supported(self) -> bool:
        return False

    def start(self, on_result: ResultCallback, on_end: EndCallback) -> None:
        raise VoiceCaptureError("speech recognition unavailable")

    def stop(self) -> None:
        pass


class TranscriptRelay:
    """Forwards transcript segments pushed by a client to the active listener."""

    def __init__(self):
        self._on_result: Optional[ResultCallback] = None
        self._on_end: Optional[EndCallback] = None

    @property
    def active(self) -> bool:
        return self._on_result is not None

    def is_supported(self) -> bool:
        return True

    def start(self, on_result: ResultCallback, on_end: EndCallback) -> None:
        self._on_result = on_result
        self._on_end = on_end

    def push(self, text: str, is_final: bool) -> bool:
        if self._on_result is None:
            logger.debug("Dropping transcript segment, no active capture")
            return False
        self._on_result(text, is_final)
        return True

    def stop(self) -> None:
        on_end = self._on_end
        self._on_result = None
        self._on_end = None
        if on_end is not None:
            on_end()

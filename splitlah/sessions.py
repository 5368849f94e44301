import logging
import time
from typing import Callable

from splitlah import config
from splitlah.receipt.base import ReceiptExtractor
from splitlah.receipt.factory import get_receipt_extractor
from splitlah.state import BillSession
from splitlah.voice.base import VoiceInterpreter
from splitlah.voice.factory import get_voice_interpreter

logger = logging.getLogger("splitlah")


class SessionStore:
    """In-memory bill sessions keyed by session cookie, dropped after sitting idle."""

    def __init__(
        self,
        extractor_factory: Callable[[], ReceiptExtractor] = get_receipt_extractor,
        interpreter_factory: Callable[[], VoiceInterpreter] = get_voice_interpreter,
        ttl_seconds: int = config.SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._extractor_factory = extractor_factory
        self._interpreter_factory = interpreter_factory
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, BillSession] = {}
        self._last_seen: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get_or_create(self, session_id: str) -> BillSession:
        """Return the session for this id, starting a fresh bill if there is none.

        Raises ValueError when the configured AI provider is unknown.
        """
        now = self._clock()
        self.evict_expired(now)

        session = self._sessions.get(session_id)
        if session is None:
            session = BillSession(self._extractor_factory(), self._interpreter_factory())
            self._sessions[session_id] = session
            logger.info("Bill session started", extra={"extra_data": {"sessions": len(self._sessions)}})

        self._last_seen[session_id] = now
        return session

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)

    def evict_expired(self, now: float | None = None) -> int:
        now = self._clock() if now is None else now
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self._ttl]
        for sid in expired:
            self.discard(sid)
        if expired:
            logger.info("Expired bill sessions dropped", extra={"extra_data": {"count": len(expired)}})
        return len(expired)

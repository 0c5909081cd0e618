"""Session source interface for behavior-evaluator.

The evaluator core never reads sessions from disk or from a live agent
runtime. It consumes transcripts through the SessionSource protocol, which
the host test harness implements over whatever store it uses.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from behavior_evaluator.logging_config import get_logger
from behavior_evaluator.models.session import MessageWithParts, SessionInfo

__all__ = [
    "InMemorySessionSource",
    "SessionSource",
]

logger = get_logger(__name__)


@runtime_checkable
class SessionSource(Protocol):
    """Provider of recorded session transcripts."""

    async def get_session_info(self, session_id: str) -> SessionInfo | None:
        """Return session metadata, or None when the session does not exist."""
        ...

    async def get_messages_with_parts(self, session_id: str) -> list[Any]:
        """Return the session's messages-with-parts in chronological order."""
        ...


class InMemorySessionSource:
    """SessionSource over pre-materialized transcripts.

    Used to replay recorded sessions and in tests. Message entries are
    stored as given; the timeline normalizer validates them tolerantly.

    Example:
        source = InMemorySessionSource()
        source.add_session({"id": "ses_1", "title": "Fix bug"}, messages)

    """

    def __init__(self) -> None:
        """Initialize an empty source."""
        self._sessions: dict[str, SessionInfo] = {}
        self._messages: dict[str, list[Any]] = {}

    def add_session(
        self,
        info: SessionInfo | Mapping[str, Any],
        messages_with_parts: Iterable[MessageWithParts | Mapping[str, Any]] = (),
    ) -> SessionInfo:
        """Store a session transcript, replacing any previous one with the same id.

        Args:
            info: Session metadata, as a model or in transcript-store form.
            messages_with_parts: The session's messages in chronological order.

        Returns:
            The validated SessionInfo.

        """
        session_info = (
            info if isinstance(info, SessionInfo) else SessionInfo.model_validate(info)
        )
        self._sessions[session_info.id] = session_info
        self._messages[session_info.id] = list(messages_with_parts)

        logger.debug(
            "session_added",
            session_id=session_info.id,
            message_count=len(self._messages[session_info.id]),
        )
        return session_info

    def session_ids(self) -> list[str]:
        """Return the ids of all stored sessions in insertion order."""
        return list(self._sessions)

    async def get_session_info(self, session_id: str) -> SessionInfo | None:
        return self._sessions.get(session_id)

    async def get_messages_with_parts(self, session_id: str) -> list[Any]:
        return list(self._messages.get(session_id, []))

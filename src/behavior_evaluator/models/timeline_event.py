"""TimelineEvent model for behavior-evaluator.

This module defines the TimelineEvent model, the normalized form every
evaluator consumes. Events are produced only by the timeline normalizer.
"""

from typing import Any

from pydantic import Field, field_validator

from behavior_evaluator.models.base import FrozenSchema
from behavior_evaluator.models.enums import EventKind

__all__ = ["TimelineEvent"]


class TimelineEvent(FrozenSchema):
    """A significant event in a session timeline.

    Message-level events carry the message's full text and the tool names its
    parts reference; part-level events carry the part's own data.

    Attributes:
        timestamp: When the event occurred, in epoch milliseconds.
        kind: Type of event (user_message, assistant_message, tool_call,
            patch, reasoning, text).
        agent_name: Agent that produced the owning message (optional).
        model_id: Model that produced the owning message (optional).
        message_id: Owning message identifier.
        part_id: Part identifier for part-level events (optional).
        payload: Event-specific data.
    """

    timestamp: float
    kind: EventKind
    agent_name: str | None = None
    model_id: str | None = None
    message_id: str = ""
    part_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @field_validator("payload", mode="before")
    @classmethod
    def _missing_payload_is_empty(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @property
    def is_message(self) -> bool:
        """Whether this is a message-level (user or assistant) event."""
        return self.kind in (EventKind.user_message, EventKind.assistant_message)

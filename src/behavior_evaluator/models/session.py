"""Transcript input models for behavior-evaluator.

This module defines the read-only records the core consumes from the
external session store: session metadata, messages, and message parts.
All models tolerate the transcript store's field names (``time.created``,
``modelID``, ``messageID``, ``mode``) as well as snake_case names.
"""

import math
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, field_validator, model_validator

from behavior_evaluator.models.base import BaseSchema
from behavior_evaluator.models.enums import MessageRole

__all__ = [
    "MessageInfo",
    "MessageWithParts",
    "Part",
    "SessionInfo",
    "coerce_timestamp",
]


def coerce_timestamp(value: Any) -> float | None:
    """Convert a transcript timestamp to epoch milliseconds.

    Args:
        value: Raw timestamp value from the transcript.

    Returns:
        The timestamp as a float, or None when the value is missing,
        non-numeric, or not finite.

    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _flatten_time(data: Any, created_key: str, updated_key: str | None) -> Any:
    """Lift ``time.created``/``time.updated`` to top-level keys."""
    if not isinstance(data, dict):
        return data
    time_block = data.get("time")
    if not isinstance(time_block, dict):
        return data
    flattened = dict(data)
    if created_key not in flattened and "created" in time_block:
        flattened[created_key] = time_block["created"]
    if updated_key and updated_key not in flattened and "updated" in time_block:
        flattened[updated_key] = time_block["updated"]
    return flattened


class SessionInfo(BaseSchema):
    """Metadata identifying one agent run.

    Attributes:
        id: Session identifier.
        title: Human-readable session title.
        created_at: Creation time in epoch milliseconds.
        updated_at: Last update time in epoch milliseconds.
        version: Transcript format version reported by the store (optional).

    """

    id: str = Field(..., min_length=1)
    title: str = ""
    created_at: int = Field(
        default=0,
        validation_alias=AliasChoices("created_at", "createdAt"),
    )
    updated_at: int = Field(
        default=0,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
    )
    version: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_time_block(cls, data: Any) -> Any:
        return _flatten_time(data, "created_at", "updated_at")


class MessageInfo(BaseSchema):
    """A single transcript message, without its parts.

    Missing fields degrade to empty values rather than failing validation,
    so a partially-populated transcript still yields a timeline.

    Attributes:
        id: Message identifier.
        role: Author role; unknown roles are treated as assistant messages.
        agent_name: Agent that produced the message (transcript field ``mode``).
        model_id: Model identifier (transcript field ``modelID``).
        created_at: Creation time in epoch milliseconds.

    """

    id: str = ""
    role: MessageRole | None = None
    agent_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("agent_name", "agentName", "mode", "agent"),
    )
    model_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("model_id", "modelId", "modelID"),
    )
    created_at: float = Field(
        default=0.0,
        validation_alias=AliasChoices("created_at", "createdAt"),
    )

    @model_validator(mode="before")
    @classmethod
    def _lift_time_block(cls, data: Any) -> Any:
        return _flatten_time(data, "created_at", None)

    @field_validator("role", mode="before")
    @classmethod
    def _unknown_role_is_none(cls, value: Any) -> Any:
        if value in {role.value for role in MessageRole}:
            return value
        return None

    @field_validator("agent_name", "model_id", mode="before")
    @classmethod
    def _non_string_is_none(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @field_validator("id", mode="before")
    @classmethod
    def _non_string_id_is_empty(cls, value: Any) -> Any:
        return value if isinstance(value, str) else ""

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created(cls, value: Any) -> float:
        coerced = coerce_timestamp(value)
        return coerced if coerced is not None else 0.0

    @property
    def is_user(self) -> bool:
        """Whether this message was authored by the user."""
        return self.role == MessageRole.user


class Part(BaseSchema):
    """An atomic transcript unit belonging to a message.

    Type-specific fields (``text`` for text parts, ``files`` for patches,
    and so on) are preserved as extra attributes. Tool parts carry their
    input/output/status either at the top level or nested under ``state``.

    Attributes:
        id: Part identifier.
        message_id: Owning message identifier.
        type: Part discriminator (text, tool, patch, reasoning, step-start,
            step-finish, file).
        time: Raw time block; ``time.created`` overrides the message time.
        tool: Tool name for tool parts.
        state: Nested tool state (status, input, output, error).

    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    message_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("message_id", "messageID", "messageId"),
    )
    type: str | None = None
    time: dict[str, Any] | None = None
    tool: str | None = None
    state: dict[str, Any] | None = None

    @property
    def created_at(self) -> float | None:
        """Part creation time in epoch milliseconds, when recorded."""
        if not self.time:
            return None
        return coerce_timestamp(self.time.get("created"))


class MessageWithParts(BaseSchema):
    """A message together with its ordered parts, as returned by the store."""

    info: MessageInfo = Field(default_factory=MessageInfo)
    parts: list[Part] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def _drop_non_mappings(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [part for part in value if isinstance(part, (dict, Part))]

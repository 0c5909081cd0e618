"""Test fixtures for behavior-evaluator tests.

This package provides factories for timeline events and raw transcript
entries so tests can describe sessions compactly.
"""

from typing import Any

from behavior_evaluator.models.enums import EventKind
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = [
    "assistant_message",
    "make_session_info",
    "patch_event",
    "raw_message",
    "raw_text_part",
    "raw_tool_part",
    "text_event",
    "tool_call",
    "user_message",
]


def user_message(text: str, timestamp: float) -> TimelineEvent:
    """Build a user message event."""
    return TimelineEvent(
        timestamp=timestamp,
        kind=EventKind.user_message,
        message_id=f"msg_user_{timestamp:g}",
        payload={"role": "user", "text": text, "tools": []},
    )


def assistant_message(
    text: str,
    timestamp: float,
    agent_name: str = "build",
    tools: list[str] | None = None,
) -> TimelineEvent:
    """Build an assistant message event."""
    return TimelineEvent(
        timestamp=timestamp,
        kind=EventKind.assistant_message,
        agent_name=agent_name,
        message_id=f"msg_asst_{timestamp:g}",
        payload={"role": "assistant", "text": text, "tools": tools or []},
    )


def tool_call(
    tool: str,
    timestamp: float,
    input: dict[str, Any] | None = None,
    status: str = "completed",
    output: Any = None,
    agent_name: str = "build",
) -> TimelineEvent:
    """Build a tool call event with its data nested under ``state``."""
    state: dict[str, Any] = {"status": status, "input": input or {}}
    if output is not None:
        state["output"] = output
    return TimelineEvent(
        timestamp=timestamp,
        kind=EventKind.tool_call,
        agent_name=agent_name,
        message_id=f"msg_asst_{timestamp:g}",
        part_id=f"prt_{tool}_{timestamp:g}",
        payload={"type": "tool", "tool": tool, "state": state},
    )


def text_event(text: str, timestamp: float) -> TimelineEvent:
    """Build a text part event."""
    return TimelineEvent(
        timestamp=timestamp,
        kind=EventKind.text,
        message_id=f"msg_asst_{timestamp:g}",
        part_id=f"prt_text_{timestamp:g}",
        payload={"type": "text", "text": text},
    )


def patch_event(files: list[str], timestamp: float) -> TimelineEvent:
    """Build a patch part event."""
    return TimelineEvent(
        timestamp=timestamp,
        kind=EventKind.patch,
        message_id=f"msg_asst_{timestamp:g}",
        part_id=f"prt_patch_{timestamp:g}",
        payload={"type": "patch", "files": files},
    )


def make_session_info(session_id: str = "ses_test", created_at: int = 500) -> SessionInfo:
    """Build session metadata."""
    return SessionInfo(
        id=session_id,
        title="Test session",
        created_at=created_at,
        updated_at=created_at + 10_000,
    )


def raw_tool_part(
    tool: str,
    input: dict[str, Any] | None = None,
    created: float | None = None,
    status: str = "completed",
    part_id: str | None = None,
) -> dict[str, Any]:
    """Build a tool part in transcript-store form."""
    part: dict[str, Any] = {
        "id": part_id or f"prt_{tool}",
        "type": "tool",
        "tool": tool,
        "state": {"status": status, "input": input or {}},
    }
    if created is not None:
        part["time"] = {"created": created}
    return part


def raw_text_part(
    text: str,
    created: float | None = None,
    part_id: str | None = None,
) -> dict[str, Any]:
    """Build a text part in transcript-store form."""
    part: dict[str, Any] = {"id": part_id or "prt_text", "type": "text", "text": text}
    if created is not None:
        part["time"] = {"created": created}
    return part


def raw_message(
    message_id: str,
    role: str,
    created: Any,
    parts: list[Any] | None = None,
    mode: str | None = "build",
) -> dict[str, Any]:
    """Build a messages-with-parts entry in transcript-store form."""
    info: dict[str, Any] = {
        "id": message_id,
        "role": role,
        "time": {"created": created},
    }
    if mode is not None and role == "assistant":
        info["mode"] = mode
        info["modelID"] = "model-1"
    return {"info": info, "parts": parts or []}

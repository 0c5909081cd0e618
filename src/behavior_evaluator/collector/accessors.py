"""Tolerant accessors for timeline event payloads.

Tool parts arrive in more than one shape: the tool name, input, output and
status may sit at the top level of the part or nested under ``state``.
These helpers read them without ever raising, returning empty values for
malformed events so evaluators can treat such events as uninformative.
"""

from typing import Any

from behavior_evaluator.models.enums import EventKind, ToolStatus
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = [
    "DELEGATION_TOOLS",
    "EXECUTION_TOOLS",
    "READ_TOOLS",
    "SHELL_TOOLS",
    "WRITE_TOOLS",
    "bash_command",
    "event_text",
    "is_execution_call",
    "is_failed",
    "is_modifying",
    "is_read_call",
    "patch_files",
    "target_path",
    "tool_input",
    "tool_name",
    "tool_output",
    "tool_status",
]

READ_TOOLS: frozenset[str] = frozenset({"read", "glob", "grep", "list"})
WRITE_TOOLS: frozenset[str] = frozenset({"write", "edit"})
SHELL_TOOLS: frozenset[str] = frozenset({"bash"})
DELEGATION_TOOLS: frozenset[str] = frozenset({"task"})
EXECUTION_TOOLS: frozenset[str] = WRITE_TOOLS | SHELL_TOOLS | DELEGATION_TOOLS

_PATH_KEYS = ("filePath", "file_path", "path")


def _state(event: TimelineEvent) -> dict[str, Any]:
    state = event.payload.get("state")
    return state if isinstance(state, dict) else {}


def tool_name(event: TimelineEvent) -> str | None:
    """Return the lower-cased tool name of a tool_call event.

    Args:
        event: Timeline event to inspect.

    Returns:
        Tool name, or None for non-tool events and malformed payloads.

    """
    if event.kind != EventKind.tool_call:
        return None
    name = event.payload.get("tool")
    if not isinstance(name, str):
        name = _state(event).get("tool")
    if not isinstance(name, str) or not name.strip():
        return None
    return name.strip().lower()


def tool_input(event: TimelineEvent) -> dict[str, Any]:
    """Return the input parameters of a tool_call event (empty if absent)."""
    state_input = _state(event).get("input")
    if isinstance(state_input, dict):
        return state_input
    direct_input = event.payload.get("input")
    if isinstance(direct_input, dict):
        return direct_input
    return {}


def tool_output(event: TimelineEvent) -> Any:
    """Return the recorded output of a tool_call event, if any."""
    state = _state(event)
    if "output" in state:
        return state["output"]
    return event.payload.get("output")


def tool_status(event: TimelineEvent) -> str | None:
    """Return the status of a tool_call event (pending/running/completed/error)."""
    status = _state(event).get("status")
    if not isinstance(status, str):
        status = event.payload.get("status")
    return status if isinstance(status, str) else None


def is_failed(event: TimelineEvent) -> bool:
    """Whether a tool_call event records a failure.

    A call failed when its status is ``error`` or when it carries a truthy
    ``error`` field at the top level or in its state.

    """
    if event.kind != EventKind.tool_call:
        return False
    if tool_status(event) == ToolStatus.error.value:
        return True
    return bool(event.payload.get("error") or _state(event).get("error"))


def target_path(event: TimelineEvent) -> str | None:
    """Return the file or directory a tool_call event targets, if recorded."""
    for source in (tool_input(event), event.payload):
        for key in _PATH_KEYS:
            value = source.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def bash_command(event: TimelineEvent) -> str | None:
    """Return the shell command string of a bash tool_call event."""
    if tool_name(event) not in SHELL_TOOLS:
        return None
    command = tool_input(event).get("command")
    if not isinstance(command, str):
        command = event.payload.get("command")
    return command if isinstance(command, str) else None


def patch_files(event: TimelineEvent) -> list[str]:
    """Return the files listed by a patch event."""
    if event.kind != EventKind.patch:
        return []
    files = event.payload.get("files")
    if not isinstance(files, list):
        return []
    return [f for f in files if isinstance(f, str) and f]


def event_text(event: TimelineEvent) -> str:
    """Return the text carried by a message or text event (empty if none)."""
    text = event.payload.get("text")
    if isinstance(text, str):
        return text
    content = event.payload.get("content")
    return content if isinstance(content, str) else ""


def is_read_call(event: TimelineEvent) -> bool:
    """Whether the event is a read-class tool call."""
    return tool_name(event) in READ_TOOLS


def is_execution_call(event: TimelineEvent) -> bool:
    """Whether the event is an execution-class (state-mutating) tool call."""
    return tool_name(event) in EXECUTION_TOOLS


def is_modifying(event: TimelineEvent) -> bool:
    """Whether the event changes files: a write/edit call or a patch."""
    return event.kind == EventKind.patch or tool_name(event) in WRITE_TOOLS

"""Timeline normalizer for behavior-evaluator.

This module converts a session's messages-with-parts into a flat,
time-ordered sequence of TimelineEvents and provides query helpers over
the resulting timeline.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import Field, ValidationError

from behavior_evaluator.collector.accessors import tool_name
from behavior_evaluator.collector.source import SessionSource
from behavior_evaluator.logging_config import get_logger
from behavior_evaluator.models.base import BaseSchema
from behavior_evaluator.models.enums import EventKind, PartType
from behavior_evaluator.models.session import MessageInfo, MessageWithParts, Part
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = [
    "TimelineBuilder",
    "TimelineSummary",
    "build_timeline",
]

logger = get_logger(__name__)

# Part types that become timeline events; everything else is dropped.
PART_EVENT_KINDS: dict[str, EventKind] = {
    PartType.tool.value: EventKind.tool_call,
    PartType.patch.value: EventKind.patch,
    PartType.reasoning.value: EventKind.reasoning,
    PartType.text.value: EventKind.text,
}


def _coerce_message(raw: Any) -> tuple[MessageInfo, list[Part]] | None:
    """Validate one messages-with-parts entry, dropping malformed parts."""
    if isinstance(raw, MessageWithParts):
        return raw.info, list(raw.parts)
    if not isinstance(raw, Mapping):
        logger.warning("malformed_message_skipped", entry_type=type(raw).__name__)
        return None

    raw_info = raw.get("info")
    try:
        info = MessageInfo.model_validate(raw_info if isinstance(raw_info, Mapping) else {})
    except ValidationError as e:
        logger.warning("malformed_message_skipped", error=str(e))
        return None

    parts: list[Part] = []
    raw_parts = raw.get("parts")
    for index, raw_part in enumerate(raw_parts if isinstance(raw_parts, list) else []):
        if isinstance(raw_part, Part):
            parts.append(raw_part)
            continue
        if not isinstance(raw_part, Mapping):
            continue
        try:
            parts.append(Part.model_validate(raw_part))
        except ValidationError as e:
            logger.warning(
                "malformed_part_skipped",
                message_id=info.id,
                part_index=index,
                error=str(e),
            )
    return info, parts


def _message_text(parts: list[Part]) -> str:
    texts = []
    for part in parts:
        text = getattr(part, "text", None)
        if part.type == PartType.text.value and isinstance(text, str) and text:
            texts.append(text)
    return "\n".join(texts)


def _message_tools(parts: list[Part]) -> list[str]:
    tools: list[str] = []
    for part in parts:
        if part.type == PartType.tool.value and part.tool and part.tool not in tools:
            tools.append(part.tool)
    return tools


def _message_event(info: MessageInfo, parts: list[Part]) -> TimelineEvent:
    return TimelineEvent(
        timestamp=info.created_at,
        kind=EventKind.user_message if info.is_user else EventKind.assistant_message,
        agent_name=info.agent_name,
        model_id=info.model_id,
        message_id=info.id,
        payload={
            "role": info.role.value if info.role else None,
            "text": _message_text(parts),
            "tools": _message_tools(parts),
        },
    )


def _part_event(part: Part, info: MessageInfo) -> TimelineEvent | None:
    kind = PART_EVENT_KINDS.get(part.type or "")
    if kind is None:
        return None
    created = part.created_at
    return TimelineEvent(
        timestamp=created if created is not None else info.created_at,
        kind=kind,
        agent_name=info.agent_name,
        model_id=info.model_id,
        message_id=info.id,
        part_id=part.id,
        payload=part.model_dump(exclude_none=True),
    )


def build_timeline(messages_with_parts: Iterable[Any] | None) -> list[TimelineEvent]:
    """Build a chronological timeline from a session's messages.

    Emits one message-level event per message and one event per tool,
    patch, reasoning, or text part. The result is sorted by timestamp; the
    sort is stable, so on ties a message's own event precedes its parts and
    parts keep their declaration order.

    Args:
        messages_with_parts: Ordered ``{info, parts}`` entries. None or an
            empty list yields an empty timeline.

    Returns:
        Time-ordered list of TimelineEvents.

    """
    events: list[TimelineEvent] = []

    for raw in messages_with_parts or []:
        coerced = _coerce_message(raw)
        if coerced is None:
            continue
        info, parts = coerced

        events.append(_message_event(info, parts))
        for part in parts:
            part_event = _part_event(part, info)
            if part_event is not None:
                events.append(part_event)

    events.sort(key=lambda event: event.timestamp)

    logger.debug(
        "timeline_built",
        event_count=len(events),
        tool_calls=sum(1 for e in events if e.kind == EventKind.tool_call),
    )
    return events


class TimelineSummary(BaseSchema):
    """Counts describing a timeline.

    Attributes:
        total_events: Number of events.
        user_messages: Number of user message events.
        assistant_messages: Number of assistant message events.
        tool_calls: Number of tool call events.
        tools: Distinct tool names in first-use order.
        duration_ms: Time between the first and last event.

    """

    total_events: int = 0
    user_messages: int = 0
    assistant_messages: int = 0
    tool_calls: int = 0
    tools: list[str] = Field(default_factory=list)
    duration_ms: float = 0.0


class TimelineBuilder:
    """Builds session timelines from a session source and queries them.

    Example:
        builder = TimelineBuilder(source)
        timeline = await builder.build_timeline("ses_123")
        builder.was_tool_used(timeline, "bash")

    """

    def __init__(self, source: SessionSource) -> None:
        """Initialize the builder.

        Args:
            source: Provider of session transcripts.

        """
        self.source = source

    async def build_timeline(self, session_id: str) -> list[TimelineEvent]:
        """Fetch a session's messages once and normalize them.

        Args:
            session_id: Session to build the timeline for.

        Returns:
            Time-ordered list of TimelineEvents.

        """
        messages = await self.source.get_messages_with_parts(session_id)
        return build_timeline(messages)

    @staticmethod
    def filter_by_kind(
        timeline: list[TimelineEvent], kind: EventKind
    ) -> list[TimelineEvent]:
        """Return the events of one kind."""
        return [event for event in timeline if event.kind == kind]

    @staticmethod
    def filter_by_agent(
        timeline: list[TimelineEvent], agent_name: str
    ) -> list[TimelineEvent]:
        """Return the events produced by one agent."""
        return [event for event in timeline if event.agent_name == agent_name]

    @staticmethod
    def events_in_range(
        timeline: list[TimelineEvent], start: float, end: float
    ) -> list[TimelineEvent]:
        """Return the events with ``start <= timestamp <= end``."""
        return [event for event in timeline if start <= event.timestamp <= end]

    @staticmethod
    def events_before(
        timeline: list[TimelineEvent], timestamp: float
    ) -> list[TimelineEvent]:
        """Return the events strictly before a timestamp."""
        return [event for event in timeline if event.timestamp < timestamp]

    @staticmethod
    def events_after(
        timeline: list[TimelineEvent], timestamp: float
    ) -> list[TimelineEvent]:
        """Return the events strictly after a timestamp."""
        return [event for event in timeline if event.timestamp > timestamp]

    def tool_calls(self, timeline: list[TimelineEvent]) -> list[TimelineEvent]:
        """Return the tool call events."""
        return self.filter_by_kind(timeline, EventKind.tool_call)

    def user_messages(self, timeline: list[TimelineEvent]) -> list[TimelineEvent]:
        """Return the user message events."""
        return self.filter_by_kind(timeline, EventKind.user_message)

    def assistant_messages(
        self, timeline: list[TimelineEvent]
    ) -> list[TimelineEvent]:
        """Return the assistant message events."""
        return self.filter_by_kind(timeline, EventKind.assistant_message)

    def first_event_of_kind(
        self, timeline: list[TimelineEvent], kind: EventKind
    ) -> TimelineEvent | None:
        """Return the earliest event of a kind, if any."""
        events = self.filter_by_kind(timeline, kind)
        return events[0] if events else None

    def last_event_of_kind(
        self, timeline: list[TimelineEvent], kind: EventKind
    ) -> TimelineEvent | None:
        """Return the latest event of a kind, if any."""
        events = self.filter_by_kind(timeline, kind)
        return events[-1] if events else None

    def tools_used(self, timeline: list[TimelineEvent]) -> list[str]:
        """Return distinct tool names in first-use order."""
        tools: list[str] = []
        for event in self.tool_calls(timeline):
            name = tool_name(event)
            if name is not None and name not in tools:
                tools.append(name)
        return tools

    def was_tool_used(self, timeline: list[TimelineEvent], name: str) -> bool:
        """Whether a tool was invoked at least once."""
        return name.lower() in self.tools_used(timeline)

    def count_tool_usage(self, timeline: list[TimelineEvent], name: str) -> int:
        """Count invocations of a tool."""
        return sum(
            1 for event in self.tool_calls(timeline) if tool_name(event) == name.lower()
        )

    def summary(self, timeline: list[TimelineEvent]) -> TimelineSummary:
        """Summarize a timeline.

        Args:
            timeline: Timeline to summarize.

        Returns:
            TimelineSummary with counts, tools, and duration.

        """
        duration = timeline[-1].timestamp - timeline[0].timestamp if timeline else 0.0
        return TimelineSummary(
            total_events=len(timeline),
            user_messages=len(self.user_messages(timeline)),
            assistant_messages=len(self.assistant_messages(timeline)),
            tool_calls=len(self.tool_calls(timeline)),
            tools=self.tools_used(timeline),
            duration_ms=duration,
        )

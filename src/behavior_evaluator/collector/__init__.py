"""Collector module for behavior-evaluator.

This module turns recorded session transcripts into timelines:
- source: SessionSource protocol and InMemorySessionSource
- timeline_builder: build_timeline normalizer and TimelineBuilder queries
- accessors: tolerant readers for tool-call payloads
"""

from behavior_evaluator.collector.accessors import (
    DELEGATION_TOOLS,
    EXECUTION_TOOLS,
    READ_TOOLS,
    SHELL_TOOLS,
    WRITE_TOOLS,
)
from behavior_evaluator.collector.source import InMemorySessionSource, SessionSource
from behavior_evaluator.collector.timeline_builder import (
    TimelineBuilder,
    TimelineSummary,
    build_timeline,
)

__all__ = [
    "DELEGATION_TOOLS",
    "EXECUTION_TOOLS",
    "READ_TOOLS",
    "SHELL_TOOLS",
    "WRITE_TOOLS",
    "InMemorySessionSource",
    "SessionSource",
    "TimelineBuilder",
    "TimelineSummary",
    "build_timeline",
]

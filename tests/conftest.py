"""Pytest configuration and shared fixtures for the behavior-evaluator test suite.

This module provides common fixtures used across unit and integration
tests: session metadata, an in-memory session source, and representative
recorded sessions.
"""

from typing import Any

import pytest

from behavior_evaluator.collector.source import InMemorySessionSource
from behavior_evaluator.config.settings import get_settings
from behavior_evaluator.models.session import SessionInfo
from tests.fixtures import make_session_info, raw_message, raw_text_part, raw_tool_part


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Reset the cached settings so environment overrides apply per test."""
    get_settings.cache_clear()


@pytest.fixture
def session_info() -> SessionInfo:
    """Provide metadata for a test session."""
    return make_session_info()


@pytest.fixture
def compliant_messages() -> list[dict[str, Any]]:
    """Provide a session in which the agent follows every rule.

    The agent reads guidance, asks for approval, waits for the user, and
    then edits a file it has read.
    """
    return [
        raw_message(
            "msg_1",
            "user",
            1000,
            [raw_text_part("Fix the bug in the parser function", part_id="prt_u1")],
        ),
        raw_message(
            "msg_2",
            "assistant",
            2000,
            [
                raw_tool_part(
                    "read",
                    {"filePath": "/project/.opencode/context/code.md"},
                    created=2100,
                    part_id="prt_r1",
                ),
                raw_tool_part(
                    "read", {"filePath": "/project/src/parser.ts"}, created=2200, part_id="prt_r2"
                ),
                raw_text_part(
                    "The parser drops the last token. May I edit src/parser.ts?",
                    created=2300,
                    part_id="prt_t1",
                ),
            ],
        ),
        raw_message("msg_3", "user", 3000, [raw_text_part("Yes, go ahead", part_id="prt_u2")]),
        raw_message(
            "msg_4",
            "assistant",
            4000,
            [
                raw_tool_part(
                    "edit",
                    {"filePath": "/project/src/parser.ts", "oldString": "a", "newString": "b"},
                    created=4100,
                    part_id="prt_e1",
                ),
                raw_text_part("Done.", created=4200, part_id="prt_t2"),
            ],
        ),
    ]


@pytest.fixture
def violating_messages() -> list[dict[str, Any]]:
    """Provide a session in which the agent edits without approval or context."""
    return [
        raw_message(
            "msg_1",
            "user",
            1000,
            [raw_text_part("Fix the bug in the parser function", part_id="prt_u1")],
        ),
        raw_message(
            "msg_2",
            "assistant",
            2000,
            [
                raw_tool_part(
                    "bash", {"command": "cat src/parser.ts"}, created=2100, part_id="prt_b1"
                ),
                raw_tool_part(
                    "edit",
                    {"filePath": "/project/src/parser.ts"},
                    created=2200,
                    part_id="prt_e1",
                ),
            ],
        ),
    ]


@pytest.fixture
def source(
    compliant_messages: list[dict[str, Any]],
    violating_messages: list[dict[str, Any]],
) -> InMemorySessionSource:
    """Provide a session source holding a compliant and a violating session."""
    memory_source = InMemorySessionSource()
    memory_source.add_session(
        {"id": "ses_good", "title": "Compliant", "time": {"created": 1000, "updated": 5000}},
        compliant_messages,
    )
    memory_source.add_session(
        {"id": "ses_bad", "title": "Violating", "time": {"created": 1000, "updated": 3000}},
        violating_messages,
    )
    return memory_source

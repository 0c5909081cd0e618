"""Declared behavior expectations for behavior-evaluator.

This module defines BehaviorExpectation, the explicit constraint set a test
author attaches to a recorded session for the declared-behavior evaluator.
"""

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from behavior_evaluator.models.base import BaseSchema

__all__ = ["BehaviorExpectation"]


class BehaviorExpectation(BaseSchema):
    """Expected agent behavior for a test case.

    Field names are accepted in snake_case or in the camelCase form used by
    test-case files (``mustUseTools``, ``minToolCalls``, ...). Every field is
    optional; an unset field declares no constraint.

    Attributes:
        must_use_tools: Tools that must each be invoked at least once.
        must_not_use_tools: Tools that must never be invoked.
        must_use_any_of: Alternative tool sets; at least one set must be
            fully used.
        min_tool_calls: Minimum number of tool calls.
        max_tool_calls: Maximum number of tool calls.
        requires_approval: Agent must ask for approval.
        requires_context: Agent must read a guidance file.
        should_delegate: Agent must delegate to a subagent.

    """

    model_config = ConfigDict(alias_generator=to_camel, extra="forbid")

    must_use_tools: list[str] | None = None
    must_not_use_tools: list[str] | None = None
    must_use_any_of: list[list[str]] | None = None
    min_tool_calls: int | None = Field(default=None, ge=0)
    max_tool_calls: int | None = Field(default=None, ge=0)
    requires_approval: bool | None = None
    requires_context: bool | None = None
    should_delegate: bool | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "BehaviorExpectation":
        if (
            self.min_tool_calls is not None
            and self.max_tool_calls is not None
            and self.min_tool_calls > self.max_tool_calls
        ):
            raise ValueError(
                f"min_tool_calls ({self.min_tool_calls}) exceeds "
                f"max_tool_calls ({self.max_tool_calls})"
            )
        return self

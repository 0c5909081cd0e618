"""Enumeration types for behavior-evaluator.

This module defines all enum types used throughout the evaluation framework,
including transcript vocabularies, task types, and violation taxonomy.
"""

from enum import Enum

__all__ = [
    "EventKind",
    "ExecutionMode",
    "MessageRole",
    "PartType",
    "Severity",
    "TaskType",
    "ToolStatus",
    "ViolationKind",
]


class MessageRole(str, Enum):
    """Author of a transcript message.

    Attributes:
        user: Message written by the human (or simulated human).
        assistant: Message produced by the agent.
    """

    user = "user"
    assistant = "assistant"


class PartType(str, Enum):
    """Discriminator for transcript message parts.

    Only tool, patch, reasoning and text parts become timeline events.
    """

    text = "text"
    tool = "tool"
    patch = "patch"
    reasoning = "reasoning"
    step_start = "step-start"
    step_finish = "step-finish"
    file = "file"


class ToolStatus(str, Enum):
    """Lifecycle status of a tool part."""

    pending = "pending"
    running = "running"
    completed = "completed"
    error = "error"


class EventKind(str, Enum):
    """Kind of a normalized timeline event.

    Attributes:
        user_message: One event per user message, carrying its full text.
        assistant_message: One event per assistant message, carrying its full text.
        tool_call: A tool invocation part.
        patch: A patch part listing files changed.
        reasoning: A reasoning part.
        text: A text part.
    """

    user_message = "user_message"
    assistant_message = "assistant_message"
    tool_call = "tool_call"
    patch = "patch"
    reasoning = "reasoning"
    text = "text"


class TaskType(str, Enum):
    """Classification of what the user asked the agent to do.

    Derived per evaluation from the first user message and the tools
    invoked; decides which evaluators apply.
    """

    conversational = "conversational"
    read_only = "read-only"
    bash_only = "bash-only"
    delegation = "delegation"
    code = "code"
    docs = "docs"
    tests = "tests"
    review = "review"
    create_new_file = "create-new-file"
    modify_existing_file = "modify-existing-file"
    delete_file = "delete-file"
    unknown = "unknown"


class Severity(str, Enum):
    """Severity of a rule violation.

    Attributes:
        error: Fails the evaluator.
        warning: Reported and scored, but does not fail the evaluator.
        info: Informational finding.
    """

    error = "error"
    warning = "warning"
    info = "info"


class ViolationKind(str, Enum):
    """Every violation kind an evaluator can emit."""

    missing_approval = "missing-approval"
    no_context_loaded = "no-context-loaded"
    context_loaded_late = "context-loaded-late"
    wrong_context_file = "wrong-context-file"
    bash_antipattern = "bash-antipattern"
    auto_fix_without_approval = "auto-fix-without-approval"
    missing_delegation = "missing-delegation"
    missing_required_tool = "missing-required-tool"
    missing_required_tool_set = "missing-required-tool-set"
    forbidden_tool_used = "forbidden-tool-used"
    insufficient_tool_calls = "insufficient-tool-calls"
    excessive_tool_calls = "excessive-tool-calls"
    missing_approval_request = "missing-approval-request"
    missing_context_loading = "missing-context-loading"
    missing_failure_report = "missing-failure-report"
    missing_fix_proposal = "missing-fix-proposal"
    missing_fix_approval = "missing-fix-approval"
    cleanup_without_confirmation = "cleanup-without-confirmation"
    edit_without_read = "edit-without-read"
    execution_before_read = "execution-before-read"
    evaluator_error = "evaluator-error"


class ExecutionMode(str, Enum):
    """Execution mode for running evaluators.

    Attributes:
        sequential: Execute evaluators one at a time in registration order.
        parallel: Fan evaluators out to a thread pool and collect in order.
    """

    sequential = "sequential"
    parallel = "parallel"

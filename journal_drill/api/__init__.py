"""HTTP endpoint handlers for attempt logging and progress sync."""

from journal_drill.api.handlers import (
    ApiResponse,
    AttemptRequest,
    ProgressPayload,
    handle_attempt,
    handle_progress,
)

__all__ = [
    "ApiResponse",
    "AttemptRequest",
    "ProgressPayload",
    "handle_attempt",
    "handle_progress",
]

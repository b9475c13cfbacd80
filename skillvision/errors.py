"""
Failure taxonomy for quiz submissions and recommendation lookups.

Every error carries a `kind` (logged) and an HTTP `status_code`; the
user-facing message stays generic and is chosen by the route.
"""
from typing import Optional


class PipelineError(Exception):
    """Base class for all recommendation pipeline failures."""

    kind = "PipelineError"
    status_code = 500
    # Set once the failure has been logged with its full context
    logged = False

    def __init__(self, message: str = "", *, detail: Optional[str] = None):
        super().__init__(message or self.kind)
        self.detail = detail


class Unauthenticated(PipelineError):
    """No valid caller identity on the request."""

    kind = "Unauthenticated"
    status_code = 401


class ProfileNotFound(PipelineError):
    """Quiz submitted (or progress recorded) before a profile exists."""

    kind = "ProfileNotFound"
    status_code = 404


class UpstreamUnavailable(PipelineError):
    """Generative backend unreachable, erroring or timed out."""

    kind = "UpstreamUnavailable"
    status_code = 503


class EmptyGeneration(PipelineError):
    """Generative backend answered without content."""

    kind = "EmptyGeneration"
    status_code = 502


class MalformedOutput(PipelineError):
    """Generated content is not parseable as JSON."""

    kind = "MalformedOutput"
    status_code = 502

    def __init__(self, message: str = "", *, raw_excerpt: str = "", detail: Optional[str] = None):
        super().__init__(message, detail=detail)
        self.raw_excerpt = raw_excerpt


class SchemaMismatch(PipelineError):
    """Parsed content lacks a required field or has an invalid value."""

    kind = "SchemaMismatch"
    status_code = 502

    def __init__(self, field: str, message: str = "", *, raw_excerpt: str = ""):
        super().__init__(message or f"Invalid or missing field: {field}")
        self.field = field
        self.raw_excerpt = raw_excerpt


class StorageFailure(PipelineError):
    """A database read or write failed."""

    kind = "StorageFailure"
    status_code = 500

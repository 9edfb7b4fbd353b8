"""
Error types for TubeGenie.

Each exception carries a technical message (for logs) and a user-facing
message plus HTTP status (for API responses). The API layer is the only place
that turns these into responses.
"""
from enum import Enum


class AppError(Exception):
    """Base exception for all classified failures."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, user_message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.user_message = user_message or message
        if status_code is not None:
            self.status_code = status_code


# ── caller errors ─────────────────────────────────────────────────────────────

class ValidationError(AppError):
    """Malformed caller input: empty topic, empty keyword, unknown model."""

    status_code = 400
    error = "Validation error"


class AuthenticationError(AppError):
    status_code = 401
    error = "User not authenticated"

    def __init__(self, message: str = "No valid credentials supplied"):
        super().__init__(message, "Authentication required.")


class NotFoundError(AppError):
    """Record is absent or owned by someone else; callers cannot tell which."""

    status_code = 404
    error = "Content not found"

    def __init__(self, content_id: str):
        super().__init__(f"Content {content_id!r} not found", "Content not found")
        self.content_id = content_id


class RateLimitError(AppError):
    status_code = 429
    error = "Too many requests"

    def __init__(self, action: str, retry_after: int):
        super().__init__(
            f"Rate limit exceeded for {action!r}",
            f"Too many requests. Please retry in about {retry_after}s.",
        )
        self.action = action
        self.retry_after = retry_after


# ── model output errors ───────────────────────────────────────────────────────

_NORMALIZE_USER_MSG = (
    "The AI model returned an unexpected format. "
    "Please try again or select a different model."
)


class NormalizationError(AppError):
    """The model replied, but the reply is not usable content."""

    status_code = 500
    error = "AI response processing error"

    def __init__(self, message: str, model: str):
        super().__init__(message, _NORMALIZE_USER_MSG)
        self.model = model


class MalformedResponse(NormalizationError):
    def __init__(self, model: str, reason: str, excerpt: str = ""):
        super().__init__(f"Malformed JSON from {model}: {reason}", model)
        self.reason = reason
        self.excerpt = excerpt


class IncompleteResponse(NormalizationError):
    def __init__(self, model: str, missing: list[str]):
        super().__init__(
            f"Response from {model} is missing required fields: {', '.join(missing)}",
            model,
        )
        self.missing = list(missing)


class InvalidFieldType(NormalizationError):
    def __init__(self, model: str, field: str, expected: str):
        super().__init__(f"Field {field!r} from {model} must be {expected}", model)
        self.field = field
        self.expected = expected


# ── upstream provider errors ──────────────────────────────────────────────────

class UpstreamFailure(str, Enum):
    RATE_LIMITED = "rate_limited"
    AUTH_FAILED = "auth_failed"
    BAD_REQUEST = "bad_request"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


# kind → (status, error label, user message)
_UPSTREAM_RESPONSES: dict[UpstreamFailure, tuple[int, str, str]] = {
    UpstreamFailure.RATE_LIMITED: (
        429, "AI service temporarily unavailable", "Please try again in a few moments.",
    ),
    UpstreamFailure.AUTH_FAILED: (
        500, "AI service configuration error", "Please contact support.",
    ),
    UpstreamFailure.BAD_REQUEST: (
        502, "Invalid request to AI service", "Please check your input and try again.",
    ),
    UpstreamFailure.UNAVAILABLE: (
        503, "AI service temporarily unavailable",
        "The AI service is currently unavailable. Please try again later.",
    ),
    UpstreamFailure.UNKNOWN: (
        502, "AI service error", "The AI service failed to respond. Please try again later.",
    ),
}


class UpstreamServiceError(AppError):
    """The call to the model provider itself failed."""

    def __init__(self, kind: UpstreamFailure, detail: str = ""):
        status, label, user_msg = _UPSTREAM_RESPONSES[kind]
        super().__init__(f"Upstream {kind.value}: {detail}" if detail else f"Upstream {kind.value}", user_msg, status)
        self.kind = kind
        self.detail = detail
        self.error = label

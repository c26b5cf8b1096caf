
"""
Custom exceptions for the health dialogue bot.

These exceptions are intentionally simple and descriptive.
They are used across:

  - core/api/            (generation oracle adapter)
  - core/synthesis/      (response synthesis engine)
  - runtime/store/       (session / profile / context log stores)
  - runtime/transport/   (outbound rendering)
  - runtime/agents/      (dialogue controller)

Placing them at the project root (exceptions/) avoids circular imports and
keeps exception types consistent across modules.
"""


class HealthBotError(Exception):
    """Base class for every error raised by this project."""


class OracleError(HealthBotError):
    """
    Raised when the generation oracle fails for a reason that is neither a
    rate limit nor a safety block (connection errors, 5xx, empty output).
    The synthesis engine does not retry these.
    """

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class TransientUpstreamError(OracleError):
    """
    Raised when the oracle rejects a call because of rate limiting.

    The synthesis engine retries these up to its attempt bound and then
    degrades to the localized fallback text.
    """

    def __init__(self, message="Generation oracle is rate limited.", retry_after=None):
        self.retry_after = retry_after
        super().__init__(message, status_code=429)


class SafetyBlockedError(OracleError):
    """
    Raised when the oracle refuses to produce content because of its safety
    policy. Never retried.
    """

    def __init__(self, message="Generation blocked by safety policy.", category=None):
        self.category = category
        super().__init__(message)


class PersistenceError(HealthBotError):
    """
    Raised by the stores when a read or write against the backing storage
    fails.

    Example:
        PersistenceError("write", "session:+919999999999", cause)
    """

    def __init__(self, operation, key, cause=None):
        self.operation = operation
        self.key = key
        self.cause = cause
        msg = f"Persistence {operation} failed for key={key}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class TransportValidationError(HealthBotError):
    """
    Raised when an outbound message violates a transport constraint
    (too many options, over-long labels, ...).
    """

    def __init__(self, constraint, details=None):
        self.constraint = constraint
        self.details = details or "Outbound message rejected by transport constraints."
        super().__init__(f"{constraint}: {self.details}")


class TransitionError(HealthBotError):
    """
    Raised when the state machine or the controller's dispatch table is
    missing an entry. This is a programming error, not a runtime condition.
    """

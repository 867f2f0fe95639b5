"""Domain-specific errors for devcaps."""


class DevcapsError(Exception):
    """Base error for devcaps."""


class ProfileValidationError(DevcapsError):
    """Raised when a profile file does not conform to schema or semantics."""


class ProfileLoadError(DevcapsError):
    """Raised when loading profile sources fails."""


class ProfileSelectionError(DevcapsError):
    """Raised when a profile id or capability cannot be resolved."""


class MalformedRequestError(DevcapsError):
    """Raised when a required request field is missing or has the wrong type."""


class UnknownActionError(DevcapsError):
    """Raised when an event action has no known emitter."""

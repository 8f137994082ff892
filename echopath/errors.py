"""
Error Types
===========

Exception hierarchy for EchoPath.

Feedback delivery failures are never raised through these types; they
are logged and swallowed at the capability boundary so session state
keeps moving. The errors here cover programming and configuration
mistakes, plus lookups the API layer turns into HTTP responses.
"""


class EchoPathError(Exception):
    """Base class for all EchoPath errors."""


class UnknownHapticKindError(EchoPathError, ValueError):
    """Raised when a haptic kind outside the closed kind set is encoded."""

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unknown haptic kind: {kind!r}")


class DuplicateCommandError(EchoPathError, ValueError):
    """Raised when a voice command table contains the same phrase twice."""

    def __init__(self, phrase: str) -> None:
        self.phrase = phrase
        super().__init__(f"Duplicate voice command phrase: {phrase!r}")


class SessionNotFoundError(EchoPathError, KeyError):
    """Raised when a coordinator session id is not registered."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")

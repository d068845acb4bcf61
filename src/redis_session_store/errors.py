"""Exception hierarchy for the session store.

NotFound and the expired-touch race are ordinary outcomes (``None`` and
``TouchResult.EXPIRED``) and therefore have no exception type here.

Classes
-------
- SessionStoreError   — base class for every error raised by this package
- SerializationError  — a payload could not be encoded or decoded
- StoreCommandError   — the key-value store rejected or failed a command
- ConfigurationError  — an option has an unusable type or value
"""
from __future__ import annotations


class SessionStoreError(Exception):
    """Base class for all session store errors."""


class SerializationError(SessionStoreError):
    """Raised when a session cannot be stringified or a payload parsed.

    Parameters
    ----------
    operation:
        ``"stringify"`` or ``"parse"``.
    session_id:
        The session being processed, when known.
    """

    def __init__(self, operation: str, session_id: str | None = None, reason: str = "") -> None:
        self.operation = operation
        self.session_id = session_id
        target = f" for session {session_id!r}" if session_id is not None else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Could not {operation} payload{target}{detail}")


class StoreCommandError(SessionStoreError):
    """Raised when the underlying store fails a command.

    The original client exception is kept as ``__cause__`` and its message
    is reproduced verbatim.

    Parameters
    ----------
    command:
        Generic command name, e.g. ``"GET"`` or ``"SCAN"``.
    """

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        super().__init__(f"{command} failed: {message}")


class ConfigurationError(SessionStoreError):
    """Raised when an option cannot be used, e.g. a ``ttl`` of the wrong type."""


__all__ = [
    "SessionStoreError",
    "SerializationError",
    "StoreCommandError",
    "ConfigurationError",
]

"""In-memory state of the current login attempt."""

from __future__ import annotations

import threading

from gc_auth.logging_config import get_logger

logger = get_logger(__name__)


class SessionState:
    """Secrets held by one flow engine across a single login attempt.

    The code verifier lives from the moment a PKCE login request is issued
    until its exchange completes. The access token is set by a successful
    login and cleared by any failure. All mutation goes through the methods
    below, which hold a lock so the state can be touched from a background
    event loop thread.
    """

    def __init__(self) -> None:
        self._code_verifier: str | None = None
        self._access_token: str | None = None
        self._lock = threading.Lock()

    @property
    def code_verifier(self) -> str | None:
        """PKCE verifier of the in-flight attempt, if any."""
        with self._lock:
            return self._code_verifier

    @property
    def access_token(self) -> str | None:
        """Access token of the current authenticated session, if any."""
        with self._lock:
            return self._access_token

    def begin_attempt(self, code_verifier: str) -> None:
        """Start a PKCE login attempt.

        Overwrites any verifier still in flight, which invalidates the
        exchange that was going to use it.
        """
        with self._lock:
            if self._code_verifier is not None:
                logger.debug("Replacing verifier of an unfinished login attempt")
            self._code_verifier = code_verifier
            self._access_token = None

    def set_access_token(self, access_token: str) -> None:
        """Record a successful login, consuming the verifier."""
        with self._lock:
            self._code_verifier = None
            self._access_token = access_token

    def finish_attempt(self, code_verifier: str | None, access_token: str | None) -> bool:
        """Settle the attempt that sent ``code_verifier`` to the token endpoint.

        Consumes the verifier and stores ``access_token`` (None clears the
        token) only while the session still holds that verifier. If a newer
        attempt replaced it in the meantime the state is left alone.

        Returns:
            False when the attempt was superseded
        """
        with self._lock:
            if self._code_verifier != code_verifier:
                return False
            self._code_verifier = None
            self._access_token = access_token
            return True

    def reset(self) -> None:
        """Clear both verifier and access token."""
        with self._lock:
            self._code_verifier = None
            self._access_token = None

    def __repr__(self) -> str:
        return (
            f"SessionState(code_verifier={'set' if self.code_verifier else None}, "
            f"access_token={'set' if self.access_token else None})"
        )

"""Authorization code exchange against the token endpoint.

Every outcome of the exchange is returned as an ``AuthResult``; expected
failures (transport errors, provider errors, undecodable bodies) never
raise. Whatever the outcome, the code verifier of the attempt is spent,
unless a newer login attempt replaced it while the request was in flight;
then the session belongs to that attempt and is left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from gc_auth.config import DEFAULT_HTTP_TIMEOUT
from gc_auth.logging_config import get_logger
from gc_auth.oauth.endpoints import build_token_request
from gc_auth.security import mask_sensitive_data, redact

if TYPE_CHECKING:
    from gc_auth.config import FlowConfig
    from gc_auth.oauth.session import SessionState

logger = get_logger(__name__)

TRANSPORT_FAILURE = "transport failure"
DECODE_FAILURE = "invalid token response"
SUPERSEDED = "login attempt superseded"


class TokenResponse(BaseModel):
    """Token endpoint response body.

    Every field is optional: the same shape carries both the success and
    the error payloads.
    """

    access_token: str | None = None
    expires_in: int | None = None
    token_type: str | None = None
    error: str | None = None
    description: str | None = None
    error_description: str | None = None
    refresh_token: str | None = None

    model_config = {"extra": "ignore"}

    def error_message(self, status_code: int) -> str:
        """Describe a failed exchange.

        Uses the provider's error code, or the HTTP status when there is
        none, followed by the provider's description when present.

        Args:
            status_code: HTTP status of the response

        Returns:
            Error message such as ``"invalid_grant - code expired"``
        """
        message = self.error if self.error is not None else str(status_code)
        if self.description is not None:
            message = f"{message} - {self.description}"
        return message


@dataclass(frozen=True)
class AuthResult:
    """Terminal result of a login attempt.

    Exactly one of ``token`` and ``error`` is set. ``error`` may be an
    empty string when the provider gave no reason.
    """

    token: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the login succeeded."""
        return self.error is None

    @classmethod
    def success(cls, token: str) -> AuthResult:
        return cls(token=token)

    @classmethod
    def failure(cls, message: str) -> AuthResult:
        return cls(error=message)


class TokenExchangeClient:
    """Exchanges an authorization code and the stored verifier for a token."""

    def __init__(
        self,
        config: FlowConfig,
        session: SessionState,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        """Initialize the exchange client.

        Args:
            config: Flow configuration
            session: Session state holding the code verifier
            http_client: Optional custom HTTP client
            timeout: Request timeout in seconds for an owned client
        """
        self._config = config
        self._session = session
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def exchange(self, code: str) -> AuthResult:
        """Exchange an authorization code for an access token.

        The session must hold the verifier issued with the authorize
        request. Without one the request is still sent with an empty
        verifier and the provider rejects it.

        Args:
            code: Authorization code from the redirect

        Returns:
            Success with the access token, or failure with a message
        """
        code_verifier = self._session.code_verifier
        if code_verifier is None:
            logger.warning("Exchanging authorization code without a code verifier")

        request = build_token_request(self._config, code, code_verifier)
        client = await self._get_client()

        logger.debug(
            "Exchanging authorization code %s (verifier: %s) at %s",
            redact(code),
            redact(code_verifier),
            request.url,
        )

        try:
            response = await client.request(
                request.method,
                request.url,
                headers=list(request.headers),
                content=request.body,
            )
        except httpx.HTTPError as e:
            logger.error("Token exchange transport error: %s", e)
            return self._finish(code_verifier, AuthResult.failure(TRANSPORT_FAILURE))

        try:
            token_response = TokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(
                "Token exchange returned an undecodable body (status %s, %d errors)",
                response.status_code,
                e.error_count(),
            )
            return self._finish(code_verifier, AuthResult.failure(DECODE_FAILURE))

        logger.debug(
            "Token endpoint replied %s: %s",
            response.status_code,
            mask_sensitive_data(token_response.model_dump(exclude_none=True)),
        )

        if response.is_success and token_response.access_token:
            logger.info(
                "Exchanged authorization code for tokens (type: %s, expires in: %s)",
                token_response.token_type or "N/A",
                token_response.expires_in if token_response.expires_in is not None else "N/A",
            )
            return self._finish(code_verifier, AuthResult.success(token_response.access_token))

        message = token_response.error_message(response.status_code)
        logger.error("Token exchange failed: %s", message)
        return self._finish(code_verifier, AuthResult.failure(message))

    def _finish(self, code_verifier: str | None, result: AuthResult) -> AuthResult:
        """Apply ``result`` to the session unless a newer attempt replaced it."""
        if self._session.finish_attempt(code_verifier, result.token):
            return result

        logger.warning("Login attempt was replaced while its code exchange was pending")
        return AuthResult.failure(SUPERSEDED)

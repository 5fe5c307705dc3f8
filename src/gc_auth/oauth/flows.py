"""Login flow engine for the implicit and PKCE code grants.

``OAuth2LoginFlow`` is the entry point for a presentation layer: it hands
out the login and logout requests to navigate to, and turns the URL the
provider redirects back to into a token or an error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import TracebackType

import httpx

from gc_auth.config import DEFAULT_HTTP_TIMEOUT, FlowConfig
from gc_auth.logging_config import get_logger
from gc_auth.oauth.endpoints import AuthRequest, build_authorize_request, build_logout_request
from gc_auth.oauth.pkce import create_pkce_pair
from gc_auth.oauth.redirect import (
    AccessToken,
    AuthorizationCode,
    NotApplicable,
    RedirectError,
    RedirectOutcome,
    classify_redirect,
)
from gc_auth.oauth.session import SessionState
from gc_auth.oauth.token import AuthResult, TokenExchangeClient

logger = get_logger(__name__)

# Receives (token, error); both are None when the URL was not a redirect
CompletionCallback = Callable[[str | None, str | None], None]


class OAuth2LoginFlow:
    """OAuth 2.0 login against the provider at ``login.{environment}``.

    Runs the PKCE code grant or the implicit grant depending on
    ``FlowConfig.use_pkce``. One login attempt is in flight at a time:
    requesting a new login URL while an exchange is pending replaces the
    verifier that exchange depends on, and the pending exchange then
    fails without touching the new attempt.
    """

    def __init__(
        self,
        config: FlowConfig,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        """Initialize the login flow.

        Args:
            config: Flow configuration
            http_client: Optional custom HTTP client for the token exchange
            timeout: Token endpoint timeout in seconds for an owned client
        """
        self.config = config
        self._session = SessionState()
        self._token_client = TokenExchangeClient(
            config, self._session, http_client=http_client, timeout=timeout
        )

    @property
    def session(self) -> SessionState:
        """State of the current login attempt."""
        return self._session

    @property
    def access_token(self) -> str | None:
        """Access token of the current authenticated session."""
        return self._session.access_token

    @property
    def code_verifier(self) -> str | None:
        """Verifier of the in-flight PKCE attempt."""
        return self._session.code_verifier

    async def close(self) -> None:
        """Release the HTTP client if the flow owns it."""
        await self._token_client.close()

    async def __aenter__(self) -> OAuth2LoginFlow:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def build_login_request(self) -> AuthRequest:
        """Build the request that starts a login attempt.

        For the PKCE grant a fresh verifier is generated and stored in the
        session, replacing any previous one. The implicit grant leaves the
        session untouched.

        Returns:
            GET request for the authorize endpoint
        """
        if not self.config.use_pkce:
            logger.debug("Created implicit grant login request for client %s", self.config.client_id)
            return build_authorize_request(self.config)

        pkce = create_pkce_pair()
        self._session.begin_attempt(pkce.code_verifier)

        logger.debug("Created PKCE login request for client %s", self.config.client_id)
        return build_authorize_request(self.config, code_challenge=pkce.code_challenge)

    def build_logout_request(self) -> AuthRequest:
        """Build the logout request. Has no effect on the session."""
        return build_logout_request(self.config)

    def classify(self, url: str) -> RedirectOutcome:
        """Classify a navigation URL against the registered redirect URI."""
        outcome = classify_redirect(url, self.config.redirect_uri)
        if not isinstance(outcome, NotApplicable):
            logger.debug("Redirect detected: %s", type(outcome).__name__)
        return outcome

    async def exchange(self, code: str) -> AuthResult:
        """Exchange an authorization code using the stored verifier."""
        return await self._token_client.exchange(code)

    async def handle_redirect(self, url: str) -> AuthResult | None:
        """Resolve a redirect URL into the outcome of the login attempt.

        An authorization code is exchanged before returning. A provider
        error clears the session and is returned verbatim.

        Args:
            url: URL observed by the navigation surface

        Returns:
            The login result, or None if the URL is not a redirect
        """
        outcome = self.classify(url)
        if isinstance(outcome, NotApplicable):
            return None
        return await self._resolve(outcome)

    def process_redirect(
        self,
        url: str,
        on_completion: CompletionCallback,
    ) -> asyncio.Task[AuthResult] | None:
        """Resolve a redirect in the background and report through a callback.

        Must be called from a running event loop. ``on_completion`` is called
        once with ``(token, error)`` when the login attempt finishes. An
        unexpected exception in the task is reported as an error and spends
        the verifier like any other failure. For a URL that is not a
        redirect it is called immediately with ``(None, None)`` and no task
        is created.

        Args:
            url: URL observed by the navigation surface
            on_completion: Callback receiving the token or the error

        Returns:
            The task resolving the redirect, or None
        """
        outcome = self.classify(url)
        if isinstance(outcome, NotApplicable):
            on_completion(None, None)
            return None

        code_verifier = self._session.code_verifier
        task = asyncio.get_running_loop().create_task(self._resolve(outcome))

        def _deliver(done: asyncio.Task[AuthResult]) -> None:
            if done.cancelled():
                logger.warning("Redirect handling was cancelled before completion")
                return
            exc = done.exception()
            if exc is not None:
                logger.error("Redirect handling failed: %s", exc, exc_info=exc)
                self._session.finish_attempt(code_verifier, None)
                on_completion(None, str(exc) or type(exc).__name__)
                return
            result = done.result()
            on_completion(result.token, result.error)

        task.add_done_callback(_deliver)
        return task

    async def _resolve(self, outcome: RedirectOutcome) -> AuthResult:
        if isinstance(outcome, AccessToken):
            self._session.set_access_token(outcome.token)
            logger.info("Logged in with implicit grant token")
            return AuthResult.success(outcome.token)

        if isinstance(outcome, AuthorizationCode):
            return await self.exchange(outcome.code)

        message = outcome.message if isinstance(outcome, RedirectError) else ""
        logger.error("Login failed on redirect: %s", message or "<no error reported>")
        self._session.reset()
        return AuthResult.failure(message)

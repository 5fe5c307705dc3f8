"""Request construction for the identity provider's login endpoints.

Requests are returned as plain ``AuthRequest`` values so the caller decides
how to dispatch them: a browser or web view for the authorize and logout
pages, ``httpx`` for the token endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from gc_auth.config import FlowConfig
from gc_auth.oauth.pkce import CODE_CHALLENGE_METHOD

AUTHORIZE_PATH = "/oauth/authorize"
TOKEN_PATH = "/oauth/token"
LOGOUT_PATH = "/logout"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class AuthRequest:
    """An HTTP request to be dispatched by the caller.

    Attributes:
        method: HTTP method
        url: Absolute URL including any query string
        headers: Header name/value pairs in send order
        body: Encoded request body, if any
    """

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None


def login_base_url(environment: str) -> str:
    """Return the login host URL for an environment."""
    return f"https://login.{environment}"


def build_authorize_request(
    config: FlowConfig,
    code_challenge: str | None = None,
) -> AuthRequest:
    """Build the authorization request for either grant type.

    With a code challenge the request asks for an authorization code
    (PKCE grant); without one it asks for a token directly (implicit grant).

    Args:
        config: Flow configuration
        code_challenge: S256 challenge for the PKCE grant

    Returns:
        GET request for the authorize endpoint
    """
    params: list[tuple[str, str]]
    if code_challenge is not None:
        params = [
            ("response_type", "code"),
            ("client_id", config.client_id),
            ("redirect_uri", config.redirect_uri),
            ("code_challenge", code_challenge),
            ("code_challenge_method", CODE_CHALLENGE_METHOD),
        ]
    else:
        params = [
            ("response_type", "token"),
            ("client_id", config.client_id),
            ("redirect_uri", config.redirect_uri),
        ]

    if config.has_org_routing:
        params.append(("org", config.auth_org or ""))
        params.append(("provider", config.auth_provider or ""))

    url = f"{login_base_url(config.environment)}{AUTHORIZE_PATH}?{urlencode(params)}"
    return AuthRequest(method="GET", url=url)


def build_logout_request(config: FlowConfig) -> AuthRequest:
    """Build the logout request."""
    return AuthRequest(method="GET", url=f"{login_base_url(config.environment)}{LOGOUT_PATH}")


def build_token_request(
    config: FlowConfig,
    code: str,
    code_verifier: str | None,
) -> AuthRequest:
    """Build the authorization-code-for-token exchange request.

    Args:
        config: Flow configuration
        code: Authorization code from the redirect
        code_verifier: Verifier issued with the authorize request; sent
            empty when missing

    Returns:
        Form-encoded POST request for the token endpoint
    """
    form = [
        ("grant_type", "authorization_code"),
        ("client_id", config.client_id),
        ("redirect_uri", config.redirect_uri),
        ("code", code),
        ("code_verifier", code_verifier or ""),
    ]
    return AuthRequest(
        method="POST",
        url=f"{login_base_url(config.environment)}{TOKEN_PATH}",
        headers=(
            ("Content-Type", FORM_CONTENT_TYPE),
            ("Accept", "application/json"),
        ),
        body=urlencode(form).encode("ascii"),
    )

"""OAuth 2.0 login flows for gc-auth.

Provides the PKCE Authorization Code grant and the Implicit grant, redirect
interpretation, and the authorization code exchange.
"""

from gc_auth.oauth.endpoints import AuthRequest
from gc_auth.oauth.flows import OAuth2LoginFlow
from gc_auth.oauth.pkce import (
    PKCEPair,
    create_pkce_pair,
    generate_code_challenge,
    generate_code_verifier,
    verify_code_challenge,
)
from gc_auth.oauth.redirect import (
    AccessToken,
    AuthorizationCode,
    NotApplicable,
    RedirectError,
    RedirectOutcome,
    classify_redirect,
)
from gc_auth.oauth.session import SessionState
from gc_auth.oauth.token import AuthResult, TokenExchangeClient, TokenResponse

__all__ = [
    "AccessToken",
    "AuthRequest",
    "AuthResult",
    "AuthorizationCode",
    "NotApplicable",
    "OAuth2LoginFlow",
    "PKCEPair",
    "RedirectError",
    "RedirectOutcome",
    "SessionState",
    "TokenExchangeClient",
    "TokenResponse",
    "classify_redirect",
    "create_pkce_pair",
    "generate_code_challenge",
    "generate_code_verifier",
    "verify_code_challenge",
]

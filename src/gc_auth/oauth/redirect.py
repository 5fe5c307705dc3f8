"""Interpretation of identity provider redirects.

The provider returns its result on the registered redirect URI, either in
the query string (code grant) or in the fragment (implicit grant).
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qsl, urlsplit


@dataclass(frozen=True)
class AccessToken:
    """Implicit grant success: the token arrived on the redirect."""

    token: str


@dataclass(frozen=True)
class AuthorizationCode:
    """Code grant success: the code still has to be exchanged."""

    code: str


@dataclass(frozen=True)
class RedirectError:
    """The provider reported a failure, or the redirect carried no result.

    ``message`` is empty when the redirect matched but held none of the
    recognized parameters.
    """

    message: str


@dataclass(frozen=True)
class NotApplicable:
    """The URL is not the registered redirect URI; navigation should proceed."""


RedirectOutcome = AccessToken | AuthorizationCode | RedirectError | NotApplicable


def _parse_pairs(component: str) -> dict[str, str]:
    # A literal "+" is data here, not an encoded space
    params: dict[str, str] = {}
    for name, value in parse_qsl(component.replace("+", "%2B"), keep_blank_values=True):
        params.setdefault(name, value)
    return params


def extract_redirect_params(url: str) -> dict[str, str]:
    """Collect the parameters carried by a redirect URL.

    Query parameters win. Parameters embedded in the fragment, after its
    last ``?`` or the whole fragment when there is none, fill in the names
    the query does not have.

    Args:
        url: Redirect URL

    Returns:
        Mapping of parameter name to first value
    """
    parts = urlsplit(url)
    params = _parse_pairs(parts.query)

    if parts.fragment:
        fragment_query = parts.fragment.rsplit("?", 1)[-1]
        for name, value in _parse_pairs(fragment_query).items():
            params.setdefault(name, value)

    return params


def classify_redirect(url: str, redirect_uri: str) -> RedirectOutcome:
    """Classify a navigation URL against the registered redirect URI.

    Args:
        url: URL observed by the navigation surface
        redirect_uri: Registered redirect URI

    Returns:
        The redirect outcome
    """
    if not url.startswith(redirect_uri):
        return NotApplicable()

    params = extract_redirect_params(url)

    access_token = params.get("access_token")
    if access_token:
        return AccessToken(access_token)

    code = params.get("code")
    if code is not None:
        return AuthorizationCode(code)

    error = params.get("error")
    if error is not None:
        return RedirectError(error)

    return RedirectError("")

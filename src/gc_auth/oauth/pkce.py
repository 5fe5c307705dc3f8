"""PKCE (Proof Key for Code Exchange) implementation.

Implements RFC 7636 for secure OAuth 2.0 Authorization Code flows.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import string
from dataclasses import dataclass

from gc_auth.security import constant_time_equals

# RFC 7636 section 4.1 unreserved characters
UNRESERVED_CHARACTERS = string.ascii_letters + string.digits + "-._~"

MIN_VERIFIER_LENGTH = 43
MAX_VERIFIER_LENGTH = 128
DEFAULT_VERIFIER_LENGTH = 128

CODE_CHALLENGE_METHOD = "S256"


@dataclass(frozen=True)
class PKCEPair:
    """PKCE code verifier and challenge pair.

    Attributes:
        code_verifier: Random string sent with the token request
        code_challenge: S256 transform of the verifier sent with the auth request
    """

    code_verifier: str
    code_challenge: str


def generate_code_verifier(length: int = DEFAULT_VERIFIER_LENGTH) -> str:
    """Generate a cryptographically random code verifier.

    Each character is drawn uniformly from the unreserved URI set
    ``[A-Za-z0-9-._~]``.

    Args:
        length: Verifier length, between 43 and 128 inclusive

    Returns:
        Code verifier string

    Raises:
        ValueError: If length is outside the range allowed by RFC 7636
    """
    if not MIN_VERIFIER_LENGTH <= length <= MAX_VERIFIER_LENGTH:
        msg = (
            f"length must be between {MIN_VERIFIER_LENGTH} and "
            f"{MAX_VERIFIER_LENGTH}, got {length}"
        )
        raise ValueError(msg)

    return "".join(secrets.choice(UNRESERVED_CHARACTERS) for _ in range(length))


def generate_code_challenge(verifier: str) -> str:
    """Generate a code challenge from a code verifier.

    Computes the S256 code challenge as specified in RFC 7636:
    BASE64URL(SHA256(ASCII(code_verifier)))

    Args:
        verifier: The code verifier string

    Returns:
        Base64url-encoded SHA256 hash (without padding)
    """
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def verify_code_challenge(verifier: str, challenge: str) -> bool:
    """Check that a challenge was derived from the given verifier."""
    return constant_time_equals(generate_code_challenge(verifier), challenge)


def create_pkce_pair(length: int = DEFAULT_VERIFIER_LENGTH) -> PKCEPair:
    """Create a new PKCE code verifier/challenge pair.

    Args:
        length: Verifier length

    Returns:
        PKCEPair with verifier and challenge
    """
    verifier = generate_code_verifier(length)
    return PKCEPair(code_verifier=verifier, code_challenge=generate_code_challenge(verifier))

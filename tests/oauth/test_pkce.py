"""Tests for PKCE implementation."""

from __future__ import annotations

import base64
import hashlib

import pytest

from gc_auth.oauth.pkce import (
    DEFAULT_VERIFIER_LENGTH,
    UNRESERVED_CHARACTERS,
    PKCEPair,
    create_pkce_pair,
    generate_code_challenge,
    generate_code_verifier,
    verify_code_challenge,
)

RFC7636_VERIFIER = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
RFC7636_CHALLENGE = "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"


class TestGenerateCodeVerifier:
    """Tests for generate_code_verifier function."""

    def test_default_length(self) -> None:
        """Test that the default verifier is 128 characters."""
        verifier = generate_code_verifier()
        assert len(verifier) == DEFAULT_VERIFIER_LENGTH == 128

    @pytest.mark.parametrize("length", [43, 44, 64, 100, 127, 128])
    def test_requested_length(self, length: int) -> None:
        """Test that verifiers have exactly the requested length."""
        assert len(generate_code_verifier(length)) == length

    def test_unreserved_characters(self) -> None:
        """Test that verifier uses only unreserved URI characters."""
        allowed = set(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
        )
        assert set(UNRESERVED_CHARACTERS) == allowed
        for _ in range(20):
            assert set(generate_code_verifier()) <= allowed

    def test_unique_values(self) -> None:
        """Test that verifiers are unique."""
        verifiers = {generate_code_verifier(43) for _ in range(100)}
        assert len(verifiers) == 100

    @pytest.mark.parametrize("length", [0, 42, 129, 256])
    def test_rejects_out_of_range_length(self, length: int) -> None:
        """Test that lengths outside RFC 7636 bounds are rejected."""
        with pytest.raises(ValueError, match="between 43 and 128"):
            generate_code_verifier(length)


class TestGenerateCodeChallenge:
    """Tests for generate_code_challenge function."""

    def test_rfc7636_vector(self) -> None:
        """Test the RFC 7636 appendix B example."""
        assert generate_code_challenge(RFC7636_VERIFIER) == RFC7636_CHALLENGE

    def test_no_padding_or_standard_base64_characters(self) -> None:
        """Test that challenges are base64url without padding."""
        for _ in range(50):
            challenge = generate_code_challenge(generate_code_verifier())
            assert len(challenge) == 43
            assert not set(challenge) & set("=+/")

    def test_consistent_for_same_verifier(self) -> None:
        """Test that same verifier produces same challenge."""
        verifier = generate_code_verifier()
        assert generate_code_challenge(verifier) == generate_code_challenge(verifier)

    def test_s256_algorithm(self) -> None:
        """Test that S256 algorithm is correctly implemented."""
        verifier = "test_verifier_string~with.dots"
        expected_hash = hashlib.sha256(verifier.encode("ascii")).digest()
        expected_challenge = base64.urlsafe_b64encode(expected_hash).rstrip(b"=").decode("ascii")

        assert generate_code_challenge(verifier) == expected_challenge


class TestVerifyCodeChallenge:
    """Tests for verify_code_challenge function."""

    def test_matching_pair(self) -> None:
        """Test that a derived challenge verifies."""
        assert verify_code_challenge(RFC7636_VERIFIER, RFC7636_CHALLENGE) is True

    def test_mismatched_pair(self) -> None:
        """Test that a foreign challenge does not verify."""
        assert verify_code_challenge(generate_code_verifier(), RFC7636_CHALLENGE) is False


class TestPKCEPair:
    """Tests for PKCEPair dataclass."""

    def test_is_frozen(self) -> None:
        """Test that PKCEPair is immutable."""
        pair = PKCEPair(code_verifier="verifier", code_challenge="challenge")

        with pytest.raises(AttributeError):
            pair.code_verifier = "new"  # type: ignore[misc]

    def test_create_pkce_pair(self) -> None:
        """Test that create_pkce_pair creates a matching pair."""
        pair = create_pkce_pair()

        assert len(pair.code_verifier) == 128
        assert pair.code_challenge == generate_code_challenge(pair.code_verifier)

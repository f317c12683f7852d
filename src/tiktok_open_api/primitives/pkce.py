"""PKCE (Proof Key for Code Exchange) and CSRF state generation.

Implements the RFC 7636 S256 method used by TikTok Login Kit to bind an
authorization code to the party that started the flow.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import string

CODE_CHALLENGE_METHOD = "S256"

CODE_VERIFIER_LENGTH = 128
CSRF_STATE_LENGTH = 30

_UNRESERVED = string.ascii_letters + string.digits + "-._~"
_ALPHANUMERIC = string.ascii_letters + string.digits


def generate_code_verifier(length: int = CODE_VERIFIER_LENGTH) -> str:
    """Generate a cryptographically secure code verifier.

    RFC 7636 Section 4.1: the verifier must be 43-128 characters long and
    use only unreserved characters:
        [A-Z] / [a-z] / [0-9] / "-" / "." / "_" / "~"

    Args:
        length: Verifier length, 128 (the maximum) by default

    Returns:
        Random code verifier
    """
    if not (43 <= length <= 128):
        raise ValueError("code_verifier must be 43-128 characters")
    return "".join(secrets.choice(_UNRESERVED) for _ in range(length))


def generate_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge for a verifier.

    RFC 7636 Section 4.2: BASE64URL-ENCODE(SHA256(ASCII(code_verifier)))
    without padding.
    """
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate_csrf_state(length: int = CSRF_STATE_LENGTH) -> str:
    """Generate an unguessable alphanumeric CSRF state token."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


def states_match(expected: str, actual: str | None) -> bool:
    """Compare CSRF states in constant time. A missing state never matches."""
    if actual is None:
        return False
    return secrets.compare_digest(expected.encode(), actual.encode())

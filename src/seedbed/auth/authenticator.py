"""RS256 token signing and verification.

`Authenticator` signs claims with the key registered under its active key
identifier and verifies tokens by resolving the ``kid`` header through its
key lookup. The validity window is checked against an injectable clock so
expiry can be tested without waiting.

Verification failures raise PyJWT's exceptions (subclasses of
`jwt.PyJWTError`).
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

import jwt

from seedbed.domain.errors import SigningError
from seedbed.interfaces.clock import SystemClock

from .claims import Claims

if TYPE_CHECKING:
    from seedbed.interfaces.clock import Clock
    from seedbed.interfaces.keystore import KeyLookup

logger = logging.getLogger(__name__)

ALGORITHM = "RS256"
REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class Authenticator:
    """Sign and verify credentials.

    Args:
        active_kid: Key identifier used for signing.
        keys: Key lookup used for both signing and verification.
        issuer: If set, tokens must carry this issuer to verify.
        clock: Time source for the validity window.
        leeway: Allowed clock skew when checking the window.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        active_kid: str,
        keys: KeyLookup,
        *,
        issuer: str | None = None,
        clock: Clock | None = None,
        leeway: timedelta = timedelta(0),
    ) -> None:
        self.active_kid = active_kid
        self.keys = keys
        self.issuer = issuer
        self.clock = clock or SystemClock()
        self.leeway = leeway

    def generate_token(self, claims: Claims) -> str:
        """Sign `claims` and return the encoded token.

        Raises:
            SigningError: If the active key is missing or signing failed.
        """
        try:
            private_key = self.keys.private_key(self.active_kid)
        except KeyError as e:
            raise SigningError(f"No signing key registered under {self.active_kid!r}") from e
        try:
            return jwt.encode(
                claims.to_payload(),
                private_key,
                algorithm=ALGORITHM,
                headers={"kid": self.active_kid},
            )
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            raise SigningError(f"Signing token failed: {e}") from e

    def validate_token(self, token: str) -> Claims:
        """Verify `token` and return its claims.

        Raises:
            jwt.InvalidKeyError: If the ``kid`` header names an unknown key.
            jwt.InvalidSignatureError: If the signature does not match the key.
            jwt.InvalidIssuerError: If the issuer does not match.
            jwt.ExpiredSignatureError: If the token has expired.
            jwt.ImmatureSignatureError: If the token was issued in the future.
            jwt.InvalidTokenError: For any other malformed token.
        """
        header = jwt.get_unverified_header(token)
        kid = header.get("kid")
        if not kid:
            raise jwt.InvalidTokenError("Token header has no 'kid'")
        try:
            public_key = self.keys.public_key(kid)
        except KeyError as e:
            raise jwt.InvalidKeyError(f"Unknown key identifier {kid!r}") from e

        payload = jwt.decode(
            token,
            public_key,
            algorithms=[ALGORITHM],
            issuer=self.issuer,
            options={
                "require": REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_iat": False,
            },
        )
        claims = Claims.from_payload(payload)

        now = self.clock.now()
        if now >= claims.expires_at + self.leeway:
            raise jwt.ExpiredSignatureError("Signature has expired")
        if claims.issued_at > now + self.leeway:
            raise jwt.ImmatureSignatureError("The token is not yet valid (iat)")
        return claims

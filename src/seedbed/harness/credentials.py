"""Credential issuance for authenticated test flows.

Each `CredentialIssuer` generates its own RSA key pair at construction and
registers it under a fixed key identifier in a private key store. The store
is never mutated afterwards. Valid tokens are signed with that key; invalid
tokens carry the same ``kid`` header but are signed with a second key that is
never registered, so any verifier using the issuer's key store rejects them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import timedelta
from typing import TYPE_CHECKING

from seedbed.auth import Authenticator, Claims, KeyMaterial, MemoryKeyStore
from seedbed.auth.claims import make_roles
from seedbed.auth.keys import DEFAULT_KEY_SIZE
from seedbed.interfaces.clock import SystemClock

if TYPE_CHECKING:
    from seedbed.interfaces.clock import Clock

logger = logging.getLogger(__name__)

HARNESS_KEY_ID = "4754d86b-7a6d-4df5-9c65-224741361492"
HARNESS_ISSUER = "seedbed harness"
TOKEN_LIFETIME = timedelta(hours=1)

INVALID_TOKEN_SUBJECT = "11"
INVALID_TOKEN_ROLES = ("ADMIN", "USER")


class CredentialIssuer:
    """Mint signed test credentials.

    Args:
        clock: Time source for issued-at / expires-at.
        kid: Key identifier the signing key is registered under.
        key_size: RSA modulus size for generated keys.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        kid: str = HARNESS_KEY_ID,
        key_size: int = DEFAULT_KEY_SIZE,
    ) -> None:
        self.clock = clock or SystemClock()
        self.key_material = KeyMaterial.generate(kid, key_size)
        self.keystore = MemoryKeyStore({kid: self.key_material.private_key})
        self.authenticator = Authenticator(
            kid, self.keystore, issuer=HARNESS_ISSUER, clock=self.clock
        )

        rogue = KeyMaterial.generate(kid, key_size)
        self._rogue_signer = Authenticator(
            kid,
            MemoryKeyStore({kid: rogue.private_key}),
            issuer=HARNESS_ISSUER,
            clock=self.clock,
        )

    @property
    def kid(self) -> str:
        """Key identifier of the registered signing key."""
        return self.key_material.kid

    def claims_for(self, subject: str, roles: Iterable[str] | str) -> Claims:
        """Return claims for `subject` valid from now for one hour."""
        now = self.clock.now()
        return Claims(
            subject=subject,
            roles=make_roles(roles),
            issuer=HARNESS_ISSUER,
            issued_at=now,
            expires_at=now + TOKEN_LIFETIME,
        )

    def issue_token(self, subject: str, roles: Iterable[str] | str) -> str:
        """Return a token for `subject` signed with the registered key.

        Raises:
            SigningError: If signing failed.
        """
        logger.debug("Generating token for %s", subject)
        return self.authenticator.generate_token(self.claims_for(subject, roles))

    def issue_invalid_token(
        self,
        subject: str = INVALID_TOKEN_SUBJECT,
        roles: Iterable[str] | str = INVALID_TOKEN_ROLES,
    ) -> str:
        """Return a well-formed token signed with an unregistered key.

        Raises:
            SigningError: If signing failed.
        """
        logger.debug("Generating invalid token for %s", subject)
        return self._rogue_signer.generate_token(self.claims_for(subject, roles))

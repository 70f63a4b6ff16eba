"""Key lookup interface.

Signers fetch private keys and verifiers fetch public keys by key identifier
(the JWT ``kid`` header).
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import (
        RSAPrivateKey,
        RSAPublicKey,
    )


class KeyLookup(abc.ABC):
    """Contract for resolving signing keys by key identifier."""

    @abc.abstractmethod
    def private_key(self, kid: str) -> RSAPrivateKey:
        """Return the private key registered under `kid`.

        Raises:
            KeyError: If no key is registered under `kid`.
        """

    @abc.abstractmethod
    def public_key(self, kid: str) -> RSAPublicKey:
        """Return the public key registered under `kid`.

        Raises:
            KeyError: If no key is registered under `kid`.
        """

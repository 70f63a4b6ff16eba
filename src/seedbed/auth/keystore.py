"""In-memory key store.

Maps key identifiers to RSA private keys. The mapping is copied at
construction and never mutated afterwards, so a store can be shared
read-only between a signer and the verifiers under test.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from seedbed.interfaces.keystore import KeyLookup

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import (
        RSAPrivateKey,
        RSAPublicKey,
    )


class MemoryKeyStore(KeyLookup):
    """Key lookup backed by an immutable in-memory mapping."""

    def __init__(self, keys: Mapping[str, RSAPrivateKey]) -> None:
        self._keys = dict(keys)

    def __contains__(self, kid: object) -> bool:
        return kid in self._keys

    def private_key(self, kid: str) -> RSAPrivateKey:
        try:
            return self._keys[kid]
        except KeyError:
            raise KeyError(f"no key registered under kid {kid!r}") from None

    def public_key(self, kid: str) -> RSAPublicKey:
        return self.private_key(kid).public_key()

"""Signing key material."""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.hazmat.primitives.asymmetric import rsa

DEFAULT_KEY_SIZE = 2048


@dataclass(frozen=True)
class KeyMaterial:
    """An RSA private key and the identifier it is registered under.

    Generated in memory and never written anywhere.
    """

    kid: str
    private_key: rsa.RSAPrivateKey

    @classmethod
    def generate(cls, kid: str, key_size: int = DEFAULT_KEY_SIZE) -> KeyMaterial:
        """Generate a fresh RSA key pair registered under `kid`."""
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        return cls(kid=kid, private_key=private_key)

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        """The public half of the key pair."""
        return self.private_key.public_key()

    def __repr__(self) -> str:
        return f"KeyMaterial(kid={self.kid!r})"

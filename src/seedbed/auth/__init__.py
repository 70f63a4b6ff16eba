"""Signed credentials for authenticated test flows.

RS256 JWTs carrying a subject, roles, an issuer and a validity window. Keys
are resolved by key identifier (the ``kid`` header) through a `KeyLookup`.
"""

from .authenticator import ALGORITHM, Authenticator
from .claims import Claims
from .keys import KeyMaterial
from .keystore import MemoryKeyStore

__all__ = ["ALGORITHM", "Authenticator", "Claims", "KeyMaterial", "MemoryKeyStore"]

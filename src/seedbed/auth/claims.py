"""Token claims."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def _numeric_date(dt: datetime) -> int:
    return int(dt.timestamp())


def _from_numeric_date(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


@dataclass(frozen=True)
class Claims:
    """The assertions carried by a credential.

    Timestamps are absolute, tz-aware UTC and are encoded with whole-second
    precision (JWT NumericDate).
    """

    subject: str
    roles: tuple[str, ...]
    issuer: str
    issued_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", tuple(self.roles))
        for name in ("issued_at", "expires_at"):
            if getattr(self, name).tzinfo is None:
                raise ValueError(f"{name} must be timezone-aware")

    def to_payload(self) -> dict[str, Any]:
        """Return the JWT payload for these claims."""
        return {
            "sub": self.subject,
            "iss": self.issuer,
            "iat": _numeric_date(self.issued_at),
            "exp": _numeric_date(self.expires_at),
            "roles": list(self.roles),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Claims:
        """Build claims from a decoded JWT payload."""
        return cls(
            subject=str(payload["sub"]),
            roles=tuple(payload.get("roles", ())),
            issuer=str(payload.get("iss", "")),
            issued_at=_from_numeric_date(payload["iat"]),
            expires_at=_from_numeric_date(payload["exp"]),
        )

    def has_role(self, *roles: str) -> bool:
        """True if the claims carry at least one of `roles`."""
        return any(role in self.roles for role in roles)

    def is_valid_at(self, when: datetime) -> bool:
        """True if `when` lies inside ``[issued_at, expires_at)``."""
        return self.issued_at <= when < self.expires_at


def make_roles(roles: Iterable[str] | str) -> tuple[str, ...]:
    """Normalize a role or a collection of roles to a tuple."""
    return (roles,) if isinstance(roles, str) else tuple(roles)

"""Regex-based redactor for sanitizing secrets from strings.

Masks passwords in endpoint URLs, bearer credentials, encoded JWTs,
secret-looking query parameters and ``key=value`` / ``key: value`` fragments
(including container environment such as ``ARANGO_ROOT_PASSWORD=...``). Strict
mode also masks usernames.
"""

import re

from seedbed.interfaces import redactor
from seedbed.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
SECRET_KEYWORDS = [
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "api_key",
    "access_token",
    "authorization",
    "signature",
]
STRICT_MODE_ADDITIONAL_KEYWORDS = ["user", "username"]


def _keyword_pattern(keywords: list[str]) -> str:
    return "|".join(kw.replace("_", "[-_]?") for kw in keywords)


def _build_patterns(keywords: list[str]) -> tuple[re.Pattern[str], re.Pattern[str]]:
    kw = _keyword_pattern(keywords)
    query = re.compile(rf"([?&](?:{kw})=)[^&#\s;]*", re.IGNORECASE)
    # Matches bare keys and suffixed ones such as ARANGO_ROOT_PASSWORD.
    key_value = re.compile(
        rf"(\b(?:\w+_)?(?:{kw})\b\s*[:=]\s*)(?!{re.escape(PLACEHOLDER)})[^\s,;&]+",
        re.IGNORECASE,
    )
    return query, key_value


QUERY_STRING_PATTERN, KEY_VALUE_SECRET_PATTERN = _build_patterns(SECRET_KEYWORDS)
STRICT_MODE_QUERY_STRING_PATTERN, STRICT_MODE_KEY_VALUE_SECRET_PATTERN = (
    _build_patterns(SECRET_KEYWORDS + STRICT_MODE_ADDITIONAL_KEYWORDS)
)
BEARER_PATTERN = re.compile(r"(Bearer\s)[0-9a-zA-Z\-_\.=]+", re.IGNORECASE)
JWT_PATTERN = re.compile(r"\beyJ[\w-]*\.[\w-]+\.[\w-]+")
URL_PASSWORD_PATTERN = re.compile(r"(?<=://)([^:@/\s]+):([^@/\s]+)@")
URL_USER_PATTERN = re.compile(r"(?<=://)([^:@/\s]+)(?=:(?:\*\*\*|[^@/\s]*)@)")


class Redactor(redactor.Redactor):
    """Redactor implementation using regex-based sanitization."""

    def __init__(self, mode: RedactorMode = RedactorMode.LENIENT) -> None:
        self._mode = mode

    def sanitize(self, text: str) -> str:
        strict = self._mode == RedactorMode.STRICT
        sanitized = str(text)

        # 1) user:pass@  → user:***@
        sanitized = URL_PASSWORD_PATTERN.sub(r"\1:***@", sanitized)  # pragma: no mutate
        if strict:
            sanitized = URL_USER_PATTERN.sub(PLACEHOLDER, sanitized)

        # 2) Bearer <token> and bare encoded JWTs
        sanitized = BEARER_PATTERN.sub(rf"\1{PLACEHOLDER}", sanitized)
        sanitized = JWT_PATTERN.sub(PLACEHOLDER, sanitized)

        # 3) ?password=... style query parameters
        query_pattern = (
            STRICT_MODE_QUERY_STRING_PATTERN if strict else QUERY_STRING_PATTERN
        )
        sanitized = query_pattern.sub(rf"\1{PLACEHOLDER}", sanitized)

        # 4) key=value / key: value fragments
        key_value_pattern = (
            STRICT_MODE_KEY_VALUE_SECRET_PATTERN if strict else KEY_VALUE_SECRET_PATTERN
        )
        sanitized = key_value_pattern.sub(rf"\1{PLACEHOLDER}", sanitized)

        return sanitized

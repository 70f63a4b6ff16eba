"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used to sanitize secrets (passwords, tokens, bearer credentials) from
endpoints, error messages and captured log records before they are shown.
"""

import abc
from enum import Enum

# pylint: disable=too-few-public-methods


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact passwords/tokens but keep usernames visible.
    - STRICT: redact passwords/tokens and also usernames.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information from strings."""

    _mode: RedactorMode

    @abc.abstractmethod
    def sanitize(self, text: str) -> str:
        """Return `text` with sensitive values replaced by a placeholder."""

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode

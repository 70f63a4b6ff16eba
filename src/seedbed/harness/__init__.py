"""Integration-test harness: disposable databases and test credentials."""

from .credentials import (
    HARNESS_ISSUER,
    HARNESS_KEY_ID,
    INVALID_TOKEN_ROLES,
    INVALID_TOKEN_SUBJECT,
    TOKEN_LIFETIME,
    CredentialIssuer,
)
from .harness import HarnessBundle, IntegrationHarness
from .state import RunStateMachine

__all__ = [
    "HARNESS_ISSUER",
    "HARNESS_KEY_ID",
    "INVALID_TOKEN_ROLES",
    "INVALID_TOKEN_SUBJECT",
    "TOKEN_LIFETIME",
    "CredentialIssuer",
    "HarnessBundle",
    "IntegrationHarness",
    "RunStateMachine",
]

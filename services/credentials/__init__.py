"""Credential file inspection."""

from services.credentials.freshness import CredentialFreshnessOracle
from services.credentials.store import LocalCredentialStore

__all__ = ["CredentialFreshnessOracle", "LocalCredentialStore"]

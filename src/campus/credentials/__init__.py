"""Credential adapter registry.

Provides singleton access to the credential backend. The fake in-memory
adapter is the only one shipped; a real identity provider can be plugged in
through ``CREDENTIAL_ADAPTER`` or ``set_credentials()``.
"""

from campus.config import get_settings

_instance = None


def get_credentials():
    """Return the configured credential adapter (singleton)."""
    global _instance
    if _instance is None:
        adapter = get_settings().credential_adapter
        if adapter == "fake":
            from campus.credentials.fake import FakeCredentialAdapter

            _instance = FakeCredentialAdapter()
        else:
            raise ValueError(f"Unknown credential adapter: {adapter}")
    return _instance


def set_credentials(adapter) -> None:
    """Install a specific credential adapter."""
    global _instance
    _instance = adapter


def reset_credentials():
    """Reset the credential singleton (useful for testing)."""
    global _instance
    _instance = None

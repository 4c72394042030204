"""Credential port — abstract interface for the login credential backend."""

from abc import ABC, abstractmethod


class CredentialPort(ABC):
    """Creates and removes the login credential that backs a User record."""

    @abstractmethod
    def create(self, email: str, password: str) -> str:
        """Create a credential and return the user id it was issued under.

        Raises:
            AlreadyExists: a credential for ``email`` is already registered.
        """
        ...

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Remove the credential issued under ``user_id``.

        Raises:
            NotFound: no credential exists for ``user_id``.
        """
        ...

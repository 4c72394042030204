"""Fake credential adapter — keeps credentials in memory for tests and local runs."""

from uuid import uuid4

from campus.credentials.port import CredentialPort
from campus.errors import AlreadyExists, Internal, NotFound


class FakeCredentialAdapter(CredentialPort):
    """Credential backend that records accounts in memory for test assertions."""

    def __init__(self):
        self.accounts: dict[str, dict] = {}
        self.should_succeed = True
        self.failure_reason = "Credential backend unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Credential backend unavailable"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create(self, email: str, password: str) -> str:
        if not self.should_succeed:
            raise Internal(self.failure_reason)
        if any(account["email"] == email for account in self.accounts.values()):
            raise AlreadyExists(f"A credential for {email} already exists")

        user_id = uuid4().hex
        self.accounts[user_id] = {
            "email": email,
            "password": password,
            "email_verified": False,
        }
        return user_id

    def delete(self, user_id: str) -> None:
        if not self.should_succeed:
            raise Internal(self.failure_reason)
        if user_id not in self.accounts:
            raise NotFound(f"No credential for user {user_id}")
        del self.accounts[user_id]

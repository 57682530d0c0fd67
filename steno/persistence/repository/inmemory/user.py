"""In-memory user repository for testing."""

from typing import Optional

from steno.domain.model import User
from steno.domain.repository import UserRepository
from steno.domain.value import Email, UserId

from .store import InMemoryStore


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find user by ID."""
        return self._store.users.get(user_id)

    async def find_by_email(self, email: Email) -> Optional[User]:
        """Find user by email."""
        for user in self._store.users.values():
            if user.email == email:
                return user
        return None

    async def save(self, user: User) -> User:
        """Save user (create or update)."""
        self._store.users[user.id] = user
        return user

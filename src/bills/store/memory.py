"""
Process-local entity store.

Users are indexed by integer id; bills are kept in insertion order. All writes
go through a single lock so that id allocation and insertion happen as one
step.
"""

from __future__ import annotations

import threading

from passlib.context import CryptContext

from ..errors import ConflictError, NotFoundError, ValidationError
from ..logging import get_logger
from ..security import hash_password, verify_password
from .models import BillRecord, Role, UserRecord

logger = get_logger(__name__)


class EntityStore:
    """In-memory holder of all user and bill records."""

    def __init__(self, password_context: CryptContext | None = None):
        self._users: dict[int, UserRecord] = {}
        self._emails: set[str] = set()
        self._bills: list[BillRecord] = []
        self._next_id = 1
        self._lock = threading.Lock()
        self._password_context = password_context

    # Reads
    def get_user(self, user_id: int) -> UserRecord:
        """Return the user with ``user_id`` or raise NotFoundError."""
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", user_id=user_id)
        return user

    def list_users(self) -> list[UserRecord]:
        # dicts preserve insertion order
        return list(self._users.values())

    def list_bills(self) -> list[BillRecord]:
        return list(self._bills)

    def verify_password(self, user_id: int, password: str) -> bool:
        """Check a credential against the stored hash for ``user_id``."""
        user = self.get_user(user_id)
        return verify_password(password, user.password_hash, self._password_context)

    # Writes
    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        *,
        role: Role = Role.USER,
    ) -> UserRecord:
        """
        Create a user with the next free id.

        Raises:
            ValidationError: name, email or password is empty
            ConflictError: another user already has this email
        """
        name = (name or "").strip()
        email = (email or "").strip()

        if not name:
            raise ValidationError("name must not be empty", field="name")
        if not email:
            raise ValidationError("email must not be empty", field="email")
        if not password:
            raise ValidationError("password must not be empty", field="password")

        password_hash = hash_password(password, self._password_context)

        with self._lock:
            email_key = email.lower()
            if email_key in self._emails:
                raise ConflictError(f"A user with email {email} already exists", field="email")

            user = UserRecord(
                id=self._next_id,
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                token=None,
            )
            self._insert_user(user)

        logger.info("User created", user_id=user.id, role=user.role.value)
        return user

    def add_bill(self, title: str, author_id: int, text: str | None = None) -> BillRecord:
        """
        Append a bill authored by an existing user.

        Raises:
            ValidationError: title is empty
            NotFoundError: the author does not exist
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("title must not be empty", field="title")

        with self._lock:
            if author_id not in self._users:
                raise NotFoundError(f"Author {author_id} not found", user_id=author_id)
            bill = BillRecord(title=title, author_id=author_id, text=text)
            self._bills.append(bill)

        logger.info("Bill added", author_id=author_id)
        return bill

    def _insert_user(self, user: UserRecord) -> None:
        # Caller holds the lock
        self._users[user.id] = user
        self._emails.add(user.email.lower())
        self._next_id = max(self._next_id, user.id + 1)

    def __len__(self) -> int:
        return len(self._users)


def create_store(seed: bool = True, password_context: CryptContext | None = None) -> EntityStore:
    """Construct an entity store, optionally loaded with the demo users."""
    store = EntityStore(password_context=password_context)
    if seed:
        from .seed_data import seed_store

        seed_store(store)
    return store

"""
Seed data loaded into the entity store at process start.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..logging import get_logger
from .models import Role

if TYPE_CHECKING:
    from .memory import EntityStore

logger = get_logger(__name__)

SEED_PASSWORD = "123456"

SEED_USERS: list[tuple[str, str, Role]] = [
    ("Pasha", "pasha@gmail.com", Role.SUPERADMIN),
    ("Ira", "ira@gmail.com", Role.USER),
]


def seed_store(store: EntityStore) -> None:
    """
    Load the demo users into an empty store.

    Ids are assigned in order, so Pasha is 1 and Ira is 2. No bills are seeded.
    """
    if len(store):
        logger.debug("Store already populated, skipping seed", users=len(store))
        return

    for name, email, role in SEED_USERS:
        store.create_user(name, email, SEED_PASSWORD, role=role)

    logger.info("Seed data loaded", users=len(store))

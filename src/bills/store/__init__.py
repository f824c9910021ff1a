"""In-memory entity store for users and bills."""

from .memory import EntityStore, create_store
from .models import BillRecord, Role, UserRecord

__all__ = ["BillRecord", "EntityStore", "Role", "UserRecord", "create_store"]

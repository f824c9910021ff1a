from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ..context import get_store_from_info
from .user import user_from_record

if TYPE_CHECKING:
    from ...store.models import BillRecord
    from ..types.bill import Bill
    from ..types.user import User


def bill_from_record(record: BillRecord) -> Bill:
    from ..types.bill import Bill as BillType

    return BillType(title=record.title, text=record.text, author_id=record.author_id)


# Query resolvers
async def resolve_bills(info: strawberry.Info) -> list[Bill | None]:
    store = get_store_from_info(info)
    return [bill_from_record(record) for record in store.list_bills()]


# Field resolvers
async def resolve_bill_author(bill: Bill, info: strawberry.Info) -> User:
    """Resolve the author of a bill. The store guarantees the author exists."""
    store = get_store_from_info(info)
    record = store.get_user(bill.author_id)
    return user_from_record(record)

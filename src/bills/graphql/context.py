"""
Execution context helpers shared by GraphQL resolvers
"""

from typing import TYPE_CHECKING

import strawberry

from ..logging import get_logger

if TYPE_CHECKING:
    from ..store import EntityStore

logger = get_logger(__name__)


def get_store_from_info(info: strawberry.Info) -> "EntityStore":
    """
    Extract the entity store from the GraphQL info object.

    Raises RuntimeError if the executor did not provide one.
    """
    store = info.context.get("store")
    if store is None:
        logger.error("Entity store not found in GraphQL context")
        raise RuntimeError("Entity store is not configured")
    return store

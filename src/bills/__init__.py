"""
Bills API
In-memory GraphQL service for users and bills
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]

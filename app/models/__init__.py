"""
DevMatch — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from app.models.user import User
from app.models.connection_request import ConnectionRequest

__all__ = [
    "User",
    "ConnectionRequest",
]

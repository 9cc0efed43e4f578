from .base import (
    DynamoDBMixin,
    TableMeta,
)
from .user import User

__all__ = [
    "DynamoDBMixin",
    "TableMeta",
    "User",
]

"""
DynamoDB Learning Library

A thin wrapper around boto3 that exposes DynamoDB table management and item
CRUD twice: once over raw attribute maps and once over Pydantic models.
"""

from .config import DynamoDBConfig
from .exceptions import (
    ConnectionError,
    DynamoDBLearningError,
    InvalidArgumentError,
)
from .models import (
    DynamoDBMixin,
    TableMeta,
    User,
)
from .core import (
    AttributeSchema,
    DynamoDBBase,
    ModelTable,
    ScanIterable,
    TableSchema,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Exceptions
    "ConnectionError",
    "DynamoDBLearningError",
    "InvalidArgumentError",

    # Models
    "DynamoDBMixin",
    "TableMeta",
    "User",

    # Client facade and table handles
    "DynamoDBBase",
    "ModelTable",
    "ScanIterable",
    "AttributeSchema",
    "TableSchema",
]

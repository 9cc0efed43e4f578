# Base exception class
from .base import DynamoDBLearningError

from .domain_exceptions import (
    ConnectionError,
    InvalidArgumentError,
)

__all__ = [
    "DynamoDBLearningError",
    "ConnectionError",
    "InvalidArgumentError",
]

"""
Core components for DynamoDB operations.

- DynamoDBBase: facade offering attribute-map and model operations
- ModelTable: table handle bound to a model type
- TableSchema: explicit model-to-item mapping descriptor
"""

from .base import DynamoDBBase
from .model_table import ModelTable, ScanIterable
from .schema import AttributeSchema, TableSchema

__all__ = [
    "DynamoDBBase",
    "ModelTable",
    "ScanIterable",
    "AttributeSchema",
    "TableSchema",
]

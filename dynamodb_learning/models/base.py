"""
Base components shared by DynamoDB-backed models.

- TableMeta: declares the partition key of a model
- DynamoDBMixin: item serialization through the model's TableSchema

A model becomes storable by inheriting the mixin and declaring a nested
``Meta``:

```python
class Customer(DynamoDBMixin, BaseModel):
    customer_id: Optional[str] = None
    name: Optional[str] = None

    class Meta(TableMeta):
        partition_key = "customer_id"
```
"""

from typing import Any, Dict

from pydantic import BaseModel


class TableMeta:
    """Base class for table metadata definitions.

    Only single-attribute (partition) keys are supported.
    """
    partition_key: str


class DynamoDBMixin(BaseModel):
    """Mixin converting models to and from boto3 resource items."""

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """Convert the model to a DynamoDB item, leaving out None fields.

        Raises:
            InvalidArgumentError: If the partition key is not set
        """
        from ..core.schema import TableSchema
        return TableSchema.for_model(type(self)).to_item(self)

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]):
        """Create a model instance from a DynamoDB item."""
        from ..core.schema import TableSchema
        return TableSchema.for_model(cls).from_item(item)

"""
Bound table handle for model-based operations.

``ModelTable`` pairs a boto3 ``Table`` resource with the ``TableSchema`` of a
Pydantic model. Every method is a single request (scan excepted, which follows
continuation tokens) and returns model instances instead of raw items.
"""

import logging
from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

from .schema import TableSchema

T = TypeVar('T', bound=BaseModel)

logger = logging.getLogger(__name__)


class ScanIterable(Generic[T]):
    """Restartable, lazy sequence over every item of a table.

    Each iteration issues a fresh Scan and follows ``LastEvaluatedKey`` until
    the table is exhausted.
    """

    def __init__(self, table, schema: TableSchema, page_size: Optional[int] = None):
        self._table = table
        self._schema = schema
        self._page_size = page_size

    def pages(self) -> Iterator[Dict[str, Any]]:
        """Yield raw Scan responses, one per page."""
        scan_kwargs: Dict[str, Any] = {}
        if self._page_size:
            scan_kwargs['Limit'] = self._page_size

        page_number = 0
        while True:
            try:
                response = self._table.scan(**scan_kwargs)
            except (ClientError, BotoCoreError) as e:
                logger.error(f"Scan failed on {self._table.name}: {e}")
                raise
            page_number += 1
            logger.debug(f"Scan page {page_number} on {self._table.name} returned {response.get('Count', 0)} items")
            yield response

            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                break
            scan_kwargs['ExclusiveStartKey'] = last_key

    def __iter__(self) -> Iterator[T]:
        for page in self.pages():
            for item in page.get('Items', []):
                yield self._schema.from_item(item)

    def items(self) -> List[T]:
        """Materialize every item of the table."""
        return list(self)


class ModelTable(Generic[T]):
    """DynamoDB table bound to a model type.

    Args:
        table: boto3 ``dynamodb.Table`` resource
        schema: Schema descriptor of the model stored in the table
    """

    def __init__(self, table, schema: TableSchema):
        self.table = table
        self.schema = schema

    @property
    def table_name(self) -> str:
        return self.table.name

    @property
    def model_class(self) -> type:
        return self.schema.model_class

    def create_table(self, wait: bool = False) -> None:
        """Create the backing table with an on-demand billing mode.

        The key schema comes from the model's partition key declaration.

        Args:
            wait: Block until the table is ACTIVE
        """
        try:
            self.table.meta.client.create_table(
                TableName=self.table_name,
                KeySchema=self.schema.key_schema(),
                AttributeDefinitions=self.schema.attribute_definitions(),
                BillingMode='PAY_PER_REQUEST'
            )
            logger.info(f"Created table {self.table_name} for {self.model_class.__name__}")
            if wait:
                self.table.wait_until_exists()
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to create table {self.table_name}: {e}")
            raise

    def put_item(self, item: T) -> None:
        """Store an item, replacing any item with the same key."""
        record = self.schema.to_item(item)
        try:
            self.table.put_item(Item=record)
            logger.info(f"Put item in {self.table_name}: {self.schema.key_for(item)}")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to put item in {self.table_name}: {e}")
            raise

    def get_item(self, key_item: T) -> Optional[T]:
        """Fetch the stored item matching the key of ``key_item``.

        Returns:
            Model instance if found, None otherwise
        """
        key = self.schema.key_for(key_item)
        try:
            response = self.table.get_item(Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get item from {self.table_name}: {e}")
            raise

        if 'Item' not in response:
            logger.debug(f"No item in {self.table_name} for {key}")
            return None
        return self.schema.from_item(response['Item'])

    def update_item(self, item: T) -> T:
        """Replace every non-key attribute of the stored item.

        Fields set to None are removed from the stored item, so the result
        mirrors ``item`` exactly rather than merging with the previous state.

        Returns:
            The item as stored after the update
        """
        key = self.schema.key_for(item)
        values = self.schema.to_item(item)

        set_parts = []
        remove_parts = []
        expression_names: Dict[str, str] = {}
        expression_values: Dict[str, Any] = {}

        for i, name in enumerate(self.schema.attribute_names):
            if name == self.schema.partition_key.name:
                continue
            attr_name = f"#f{i}"
            expression_names[attr_name] = name
            if name in values:
                value_name = f":v{i}"
                expression_values[value_name] = values[name]
                set_parts.append(f"{attr_name} = {value_name}")
            else:
                remove_parts.append(attr_name)

        update_kwargs: Dict[str, Any] = {
            'Key': key,
            'ReturnValues': 'ALL_NEW'
        }
        clauses = []
        if set_parts:
            clauses.append("SET " + ", ".join(set_parts))
        if remove_parts:
            clauses.append("REMOVE " + ", ".join(remove_parts))
        if clauses:
            update_kwargs['UpdateExpression'] = " ".join(clauses)
            update_kwargs['ExpressionAttributeNames'] = expression_names
        if expression_values:
            update_kwargs['ExpressionAttributeValues'] = expression_values

        try:
            response = self.table.update_item(**update_kwargs)
            logger.info(f"Updated item in {self.table_name}: {key}")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to update item in {self.table_name}: {e}")
            raise

        return self.schema.from_item(response.get('Attributes', key))

    def delete_item(self, key_item: T) -> Optional[T]:
        """Delete the stored item matching the key of ``key_item``.

        Returns:
            The item as it was before deletion, None if nothing was stored
        """
        key = self.schema.key_for(key_item)
        try:
            response = self.table.delete_item(Key=key, ReturnValues='ALL_OLD')
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete item from {self.table_name}: {e}")
            raise

        if 'Attributes' not in response:
            logger.debug(f"Nothing to delete in {self.table_name} for {key}")
            return None
        logger.info(f"Deleted item from {self.table_name}: {key}")
        return self.schema.from_item(response['Attributes'])

    def scan(self, page_size: Optional[int] = None) -> ScanIterable[T]:
        """Lazy, restartable scan over the whole table."""
        return ScanIterable(self.table, self.schema, page_size=page_size)

    def __repr__(self) -> str:
        return f"ModelTable(table_name={self.table_name!r}, model_class={self.model_class.__name__})"

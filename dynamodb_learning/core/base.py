"""
DynamoDB client facade.

``DynamoDBBase`` offers two parallel surfaces over one boto3 session:

1. Raw attribute-map operations on the low-level ``dynamodb`` client, where
   items are maps of attribute name to tagged values (``{"S": "..."}``)
2. Model operations on the ``dynamodb`` resource, where items are Pydantic
   models mapped through a ``TableSchema``

Arguments are validated before any request is built and raise
``InvalidArgumentError``. Errors reported by DynamoDB are logged and
re-raised unchanged: there is no error mapping, no retry and no caching here.

Example:
    with DynamoDBBase.for_region("us-east-1") as db:
        db.save_item(User, "Users", User(user_id="user001", first_name="John"))
        user = db.get_item_by_key(User, "Users", User(user_id="user001"))
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

from ..config import DynamoDBConfig
from ..exceptions import ConnectionError, InvalidArgumentError
from .model_table import ModelTable
from .schema import TableSchema

T = TypeVar('T', bound=BaseModel)

logger = logging.getLogger(__name__)


def _validate_not_empty(value: Any, param_name: str) -> None:
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError.empty(param_name)


def _validate_not_null(value: Any, param_name: str) -> None:
    if value is None:
        raise InvalidArgumentError.null(param_name)


class DynamoDBBase:
    """Facade over a boto3 DynamoDB client and resource.

    The boto3 objects are created lazily on first use and released by
    ``close()``, which may be called any number of times. Instances support the
    context manager protocol and are not safe for concurrent use from several
    threads.

    With ``enable_debug_logging`` the constructor lowers the
    ``dynamodb_learning`` package logger to DEBUG. The level is process-wide
    and is left in place by ``close()``.
    """

    def __init__(self, config: Optional[DynamoDBConfig] = None):
        """Initialize the facade.

        Args:
            config: DynamoDB configuration; read from the environment when omitted
        """
        self.config = config or DynamoDBConfig.from_env()
        self._session = None
        self._client = None
        self._resource = None
        self._closed = False

        if self.config.enable_debug_logging:
            logging.getLogger("dynamodb_learning").setLevel(logging.DEBUG)

    @classmethod
    def for_region(cls, region_name: str) -> 'DynamoDBBase':
        """Create a facade for a specific AWS region."""
        return cls(DynamoDBConfig.for_region(region_name))

    # ================ Lifecycle ================

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise ConnectionError(
                "DynamoDB client has been closed",
                context={'region': self.config.region_name}
            )

    def _connection_kwargs(self) -> Dict[str, Any]:
        kwargs = {'region_name': self.config.region_name}
        if self.config.endpoint_url:
            kwargs['endpoint_url'] = self.config.endpoint_url
        return kwargs

    @property
    def session(self):
        """Lazy initialization of the boto3 session (default credential chain)."""
        self._ensure_open()
        if self._session is None:
            try:
                self._session = boto3.Session(
                    region_name=self.config.region_name,
                    profile_name=self.config.profile_name
                )
            except Exception as e:
                logger.error(f"Failed to create boto3 session: {e}")
                raise ConnectionError(f"Failed to create boto3 session: {e}", e) from e
        return self._session

    @property
    def client(self):
        """Low-level boto3 DynamoDB client used by the attribute-map operations."""
        self._ensure_open()
        if self._client is None:
            try:
                self._client = self.session.client('dynamodb', **self._connection_kwargs())
            except ConnectionError:
                raise
            except Exception as e:
                logger.error(f"Failed to create DynamoDB client: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._client

    @property
    def resource(self):
        """boto3 DynamoDB resource used by the model operations."""
        self._ensure_open()
        if self._resource is None:
            try:
                self._resource = self.session.resource('dynamodb', **self._connection_kwargs())
            except ConnectionError:
                raise
            except Exception as e:
                logger.error(f"Failed to create DynamoDB resource: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._resource

    def close(self) -> None:
        """Release the underlying HTTP connections.

        Only the first call has an effect.
        """
        if self._closed:
            return
        self._closed = True

        resource, client = self._resource, self._client
        self._session = self._client = self._resource = None
        try:
            if resource is not None:
                resource.meta.client.close()
        finally:
            if client is not None:
                client.close()
        logger.debug(f"Closed DynamoDB client for region {self.config.region_name}")

    def __enter__(self) -> 'DynamoDBBase':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _send(self, operation: str, **request: Any) -> Dict[str, Any]:
        """Forward one request to the low-level client.

        Errors reported by boto3 are logged and re-raised as they are.
        """
        try:
            return getattr(self.client, operation)(**request)
        except (ClientError, BotoCoreError) as e:
            target = request.get('TableName', 'account')
            logger.error(f"{operation} failed on {target}: {e}")
            raise

    # ================ Table Management ================

    def list_tables(self) -> Dict[str, Any]:
        """List the tables of the account (first page of ``ListTables``).

        Returns:
            Raw ListTables response with ``TableNames``
        """
        return self._send('list_tables')

    def list_table_names(self) -> List[str]:
        """List every table name, following ``LastEvaluatedTableName``."""
        paginator = self.client.get_paginator('list_tables')
        names: List[str] = []
        try:
            for page in paginator.paginate():
                names.extend(page.get('TableNames', []))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"list_tables failed: {e}")
            raise
        return names

    def create_table(self, table_name: str, partition_key: str, partition_key_type: str) -> Dict[str, Any]:
        """Create a table keyed by a single partition key.

        Composite (partition + sort) keys are not supported. The table uses
        on-demand billing.

        Args:
            table_name: Name of the table to create
            partition_key: Partition key attribute name
            partition_key_type: Key type code, "S" (string), "N" (number) or "B" (binary);
                other codes are sent as given and rejected by DynamoDB

        Returns:
            Raw CreateTable response

        Raises:
            InvalidArgumentError: If any argument is empty
        """
        _validate_not_empty(table_name, "table_name")
        _validate_not_empty(partition_key, "partition_key")
        _validate_not_empty(partition_key_type, "partition_key_type")
        key_type = partition_key_type.strip().upper()

        response = self._send(
            'create_table',
            TableName=table_name,
            KeySchema=[{'AttributeName': partition_key, 'KeyType': 'HASH'}],
            AttributeDefinitions=[{'AttributeName': partition_key, 'AttributeType': key_type}],
            BillingMode='PAY_PER_REQUEST'
        )
        logger.info(f"Created table {table_name} with partition key {partition_key} ({key_type})")
        return response

    def delete_table(self, table_name: str) -> Dict[str, Any]:
        """Delete a table.

        Returns:
            Raw DeleteTable response
        """
        _validate_not_empty(table_name, "table_name")
        response = self._send('delete_table', TableName=table_name)
        logger.info(f"Deleted table {table_name}")
        return response

    def describe_table(self, table_name: str) -> Dict[str, Any]:
        """Describe a table.

        Returns:
            Raw DescribeTable response with the ``Table`` metadata
        """
        _validate_not_empty(table_name, "table_name")
        return self._send('describe_table', TableName=table_name)

    def wait_for_table(self, table_name: str, exists: bool = True, delay: int = 2, max_attempts: int = 25) -> None:
        """Block until a table exists (and is ACTIVE) or is gone."""
        _validate_not_empty(table_name, "table_name")
        waiter = self.client.get_waiter('table_exists' if exists else 'table_not_exists')
        waiter.wait(
            TableName=table_name,
            WaiterConfig={'Delay': delay, 'MaxAttempts': max_attempts}
        )

    # ================ Attribute-Map Item Operations ================

    def put_item(self, table_name: str, item: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """Put an item into a table, replacing any item with the same key.

        Args:
            table_name: Name of the table
            item: Map of attribute names to attribute values

        Raises:
            InvalidArgumentError: If table_name is empty or item is None
        """
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(item, "item")
        response = self._send('put_item', TableName=table_name, Item=item)
        logger.info(f"Put item in {table_name}")
        return response

    def get_item(self, table_name: str, key: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """Get an item by key.

        Returns:
            Raw GetItem response; ``Item`` is missing when nothing is stored
        """
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(key, "key")
        response = self._send('get_item', TableName=table_name, Key=key)
        logger.debug(f"GetItem on {table_name} found={'Item' in response}")
        return response

    def update_item(
        self,
        table_name: str,
        key: Dict[str, Dict[str, Any]],
        attribute_updates: Dict[str, Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Update an item with the legacy ``AttributeUpdates`` parameter.

        Args:
            table_name: Name of the table
            key: Map of key attribute names to attribute values
            attribute_updates: Map of attribute names to ``{"Value": ..., "Action": ...}``
        """
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(key, "key")
        _validate_not_null(attribute_updates, "attribute_updates")
        response = self._send(
            'update_item',
            TableName=table_name,
            Key=key,
            AttributeUpdates=attribute_updates
        )
        logger.info(f"Updated item in {table_name}")
        return response

    def delete_item(self, table_name: str, key: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """Delete an item by key."""
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(key, "key")
        response = self._send('delete_item', TableName=table_name, Key=key)
        logger.info(f"Deleted item from {table_name}")
        return response

    def scan(self, table_name: str, exclusive_start_key: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Scan one page of a table.

        Only a single page is returned. When the table holds more data the
        response carries ``LastEvaluatedKey``; pass it back as
        ``exclusive_start_key`` to continue, or use ``scan_pages()``.
        """
        _validate_not_empty(table_name, "table_name")
        request: Dict[str, Any] = {'TableName': table_name}
        if exclusive_start_key:
            request['ExclusiveStartKey'] = exclusive_start_key
        response = self._send('scan', **request)
        logger.debug(f"Scan on {table_name} returned {response.get('Count', 0)} items")
        return response

    def scan_pages(self, table_name: str, page_size: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        """Iterate over every Scan page of a table, following continuation tokens."""
        _validate_not_empty(table_name, "table_name")
        paginate_kwargs: Dict[str, Any] = {'TableName': table_name}
        if page_size:
            paginate_kwargs['PaginationConfig'] = {'PageSize': page_size}
        return iter(self.client.get_paginator('scan').paginate(**paginate_kwargs))

    @staticmethod
    def create_string_attribute(value: str) -> Dict[str, str]:
        """Wrap a string as a DynamoDB string attribute value."""
        return {'S': value}

    @staticmethod
    def create_number_attribute(value: Any) -> Dict[str, str]:
        """Wrap a number (or numeric string) as a DynamoDB number attribute value."""
        return {'N': str(value)}

    @staticmethod
    def create_attribute_update(value: Optional[Dict[str, Any]], action: str = 'PUT') -> Dict[str, Any]:
        """Build one ``AttributeUpdates`` entry for ``update_item``."""
        update: Dict[str, Any] = {'Action': action}
        if value is not None:
            update['Value'] = value
        return update

    # ================ Model Operations ================

    def get_table(self, model_class: Type[T], table_name: str) -> ModelTable[T]:
        """Bind a table name to a model class.

        Raises:
            InvalidArgumentError: If an argument is missing or the model has no usable key
        """
        _validate_not_null(model_class, "model_class")
        _validate_not_empty(table_name, "table_name")
        schema = TableSchema.for_model(model_class)
        return ModelTable(self.resource.Table(table_name), schema)

    def create_table_for_model(self, model_class: Type[T], table_name: str, wait: bool = False) -> None:
        """Create a table whose key schema comes from the model's partition key."""
        self.get_table(model_class, table_name).create_table(wait=wait)

    def save_item(self, model_class: Type[T], table_name: str, item: T) -> None:
        """Save a model instance, overwriting the stored item with the same key."""
        _validate_not_null(model_class, "model_class")
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(item, "item")
        self.get_table(model_class, table_name).put_item(item)

    def get_item_by_key(self, model_class: Type[T], table_name: str, key_item: T) -> Optional[T]:
        """Fetch an item using an instance that carries only its key.

        Returns:
            The stored instance, or None if not found
        """
        _validate_not_null(model_class, "model_class")
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(key_item, "key_item")
        return self.get_table(model_class, table_name).get_item(key_item)

    def update_item_model(self, model_class: Type[T], table_name: str, item: T) -> T:
        """Replace all attributes of a stored item with those of ``item``.

        Returns:
            The updated instance as stored
        """
        _validate_not_null(model_class, "model_class")
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(item, "item")
        return self.get_table(model_class, table_name).update_item(item)

    def delete_item_by_key(self, model_class: Type[T], table_name: str, key_item: T) -> Optional[T]:
        """Delete an item by key.

        Returns:
            The deleted instance, or None if nothing was stored
        """
        _validate_not_null(model_class, "model_class")
        _validate_not_empty(table_name, "table_name")
        _validate_not_null(key_item, "key_item")
        return self.get_table(model_class, table_name).delete_item(key_item)

    def scan_all_items(self, model_class: Type[T], table_name: str) -> List[T]:
        """Return every item of a table as model instances.

        All pages are read eagerly; large tables are not chunked.
        """
        _validate_not_null(model_class, "model_class")
        _validate_not_empty(table_name, "table_name")
        items = self.get_table(model_class, table_name).scan().items()
        logger.debug(f"Scanned {len(items)} items from {table_name}")
        return items

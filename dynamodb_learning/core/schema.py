"""
Explicit table schema descriptors for Pydantic models.

A ``TableSchema`` is derived once per model class from the model's fields and
its ``Meta.partition_key`` declaration. It is the only place that knows how a
model maps onto a DynamoDB item:

- which attribute is the partition key and which scalar type code (S/N/B) it has
- how Python values are converted for the boto3 resource layer (float -> Decimal)
- how stored values come back (Decimal -> int/float, Binary -> bytes)

The boto3 resource layer performs the actual AttributeValue encoding.
"""

import logging
import types
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type, Union, get_args, get_origin

from boto3.dynamodb.types import Binary
from pydantic import BaseModel

from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

KEY_ATTRIBUTE_TYPES = ("S", "N", "B")

_TYPE_CODES = {
    str: "S",
    int: "N",
    float: "N",
    Decimal: "N",
    bytes: "B",
}


def _unwrap_optional(annotation: Any) -> Any:
    """Return X for Optional[X] / X | None, the annotation itself otherwise."""
    origin = get_origin(annotation)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _to_dynamodb_value(value: Any) -> Any:
    """Recursively convert values the boto3 resource layer cannot serialize."""
    if isinstance(value, dict):
        return {k: _to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dynamodb_value(v) for v in value]
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        # boto3 rejects float; go through str to avoid binary artefacts
        return Decimal(str(value))
    return value


class AttributeSchema:
    """Mapping of one model field onto one DynamoDB attribute."""

    def __init__(self, name: str, python_type: Any):
        self.name = name
        self.python_type = python_type
        self.attribute_type: Optional[str] = _TYPE_CODES.get(python_type)

    def to_dynamodb(self, value: Any) -> Any:
        return _to_dynamodb_value(value)

    def from_dynamodb(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, Decimal):
            if self.python_type is int:
                return int(value)
            if self.python_type is float:
                return float(value)
        if isinstance(value, Binary):
            return value.value
        return value

    def __repr__(self) -> str:
        return f"AttributeSchema(name={self.name!r}, attribute_type={self.attribute_type!r})"


class TableSchema:
    """Schema descriptor binding a model class to its DynamoDB key and attributes."""

    def __init__(
        self,
        model_class: Type[BaseModel],
        partition_key: AttributeSchema,
        attributes: Dict[str, AttributeSchema]
    ):
        self.model_class = model_class
        self.partition_key = partition_key
        self.attributes = attributes

    @classmethod
    def for_model(cls, model_class: Type[BaseModel]) -> 'TableSchema':
        """Return the (cached) schema for a model class.

        Args:
            model_class: Pydantic model class with a ``Meta.partition_key``

        Returns:
            TableSchema for the model class

        Raises:
            InvalidArgumentError: If the class cannot be mapped to a table
        """
        if not isinstance(model_class, type) or not issubclass(model_class, BaseModel):
            raise InvalidArgumentError(f"model_class must be a Pydantic model class, got {model_class!r}", "model_class")
        return _build_schema(model_class)

    @property
    def attribute_names(self) -> List[str]:
        return list(self.attributes)

    def key_schema(self) -> List[Dict[str, str]]:
        return [{'AttributeName': self.partition_key.name, 'KeyType': 'HASH'}]

    def attribute_definitions(self) -> List[Dict[str, str]]:
        return [{
            'AttributeName': self.partition_key.name,
            'AttributeType': self.partition_key.attribute_type
        }]

    def key_for(self, instance: BaseModel) -> Dict[str, Any]:
        """Build the primary key of an instance.

        Raises:
            InvalidArgumentError: If the partition key is unset or blank
        """
        self._check_instance(instance)
        name = self.partition_key.name
        value = getattr(instance, name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidArgumentError.empty(name)
        return {name: self.partition_key.to_dynamodb(value)}

    def to_item(self, instance: BaseModel) -> Dict[str, Any]:
        """Convert an instance to a boto3 resource item, leaving out None fields."""
        item = self.key_for(instance)
        data = instance.model_dump()
        for name, attribute in self.attributes.items():
            if name == self.partition_key.name:
                continue
            value = data.get(name)
            if value is not None:
                item[name] = attribute.to_dynamodb(value)
        return item

    def from_item(self, item: Dict[str, Any]) -> BaseModel:
        """Rebuild a model instance from a stored item.

        Attributes the model does not declare are ignored.
        """
        values = {
            name: attribute.from_dynamodb(item[name])
            for name, attribute in self.attributes.items()
            if name in item
        }
        return self.model_class(**values)

    def _check_instance(self, instance: Any) -> None:
        if not isinstance(instance, self.model_class):
            raise InvalidArgumentError(
                f"Expected an instance of {self.model_class.__name__}, got {type(instance).__name__}",
                "item"
            )

    def __repr__(self) -> str:
        return f"TableSchema(model_class={self.model_class.__name__}, partition_key={self.partition_key!r})"


@lru_cache(maxsize=None)
def _build_schema(model_class: Type[BaseModel]) -> TableSchema:
    meta = getattr(model_class, 'Meta', None)
    partition_key = getattr(meta, 'partition_key', None)
    if not partition_key:
        raise InvalidArgumentError(f"Model {model_class.__name__}.Meta must define partition_key", "model_class")
    if getattr(meta, 'sort_key', None):
        raise InvalidArgumentError(
            f"Model {model_class.__name__} declares a sort key; only partition keys are supported",
            "model_class"
        )
    if partition_key not in model_class.model_fields:
        raise InvalidArgumentError(
            f"Partition key '{partition_key}' is not a field of {model_class.__name__}",
            "model_class"
        )

    attributes = {
        name: AttributeSchema(name, _unwrap_optional(field.annotation))
        for name, field in model_class.model_fields.items()
    }
    key_attribute = attributes[partition_key]
    if key_attribute.attribute_type not in KEY_ATTRIBUTE_TYPES:
        raise InvalidArgumentError(
            f"Partition key '{partition_key}' of {model_class.__name__} must be a string, number or bytes field",
            "model_class"
        )

    logger.debug(f"Built table schema for {model_class.__name__} keyed on {partition_key}")
    return TableSchema(model_class, key_attribute, attributes)

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import DynamoDBMixin, TableMeta


class User(DynamoDBMixin, BaseModel):
    """
    User record stored in a table keyed by ``user_id``.

    Every field is optional so that ``User()`` and key-only instances such as
    ``User(user_id="user001")`` are valid; persistence operations reject an
    instance whose ``user_id`` is missing.
    """

    user_id: Optional[str] = Field(None, description="Unique identifier of the user (partition key)")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    age: Optional[int] = Field(None, description="Age in years")
    address: Optional[str] = Field(None, description="Postal address")

    model_config = ConfigDict(
        validate_assignment=True
    )

    class Meta(TableMeta):
        partition_key = "user_id"

    def __str__(self) -> str:
        return (
            f"User(user_id={self.user_id!r}, first_name={self.first_name!r}, "
            f"last_name={self.last_name!r}, age={self.age}, address={self.address!r})"
        )

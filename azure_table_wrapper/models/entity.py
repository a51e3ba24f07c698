"""
Table Entity Base Model

Every record stored through the wrapper is a TableEntity subclass. The store
addresses entities by a two-part key:

- PartitionKey: grouping/shard key, entities sharing one can be queried together
- RowKey: unique within its partition

Two further values are maintained by the store and never written by the client:

- etag: concurrency token returned on read/write, required by update and delete
- timestamp: last-modified time

## Usage Example

```python
class Customer(TableEntity):
    name: str
    email: Optional[str] = None

customer = Customer(partition_key="emea", row_key="42", name="Ada")
entity = customer.to_entity()
# {'PartitionKey': 'emea', 'RowKey': '42', 'name': 'Ada'}
```
"""

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from azure.data.tables import EdmType, EntityProperty
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1


def _to_store_value(value: Any) -> Any:
    # the SDK types plain ints as Edm.Int32 and rejects anything wider
    if isinstance(value, int) and not isinstance(value, bool) and not INT32_MIN <= value <= INT32_MAX:
        return EntityProperty(value, EdmType.INT64)
    return value


def _from_store_value(value: Any) -> Any:
    if isinstance(value, EntityProperty):
        return value.value
    return value


class TableEntity(BaseModel):
    """Base model for entities stored in a table.

    Subclasses declare their own properties as ordinary pydantic fields.
    Equality compares the stored properties only, so an entity read back from
    the store equals the one that was inserted even though the read copy
    carries an etag and a timestamp.
    """

    partition_key: str = Field(alias="PartitionKey", description="Grouping key of the entity")
    row_key: str = Field(alias="RowKey", description="Key of the entity within its partition")
    etag: Optional[str] = Field(default=None, exclude=True, description="Concurrency token from the last read or write")
    timestamp: Optional[datetime] = Field(default=None, exclude=True, description="Store-maintained modification time")

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore'
    )

    @property
    def key(self) -> Tuple[str, str]:
        """Return (partition_key, row_key)."""
        return self.partition_key, self.row_key

    def to_entity(self) -> Dict[str, Any]:
        """
        Convert the model to a store-ready entity mapping.

        Key fields are emitted under their store names (PartitionKey, RowKey),
        None values are dropped and etag/timestamp are never sent. Integers
        outside the Int32 range are wrapped as Edm.Int64 properties.

        Returns:
            Dictionary accepted by TableClient.create_entity / update_entity
        """
        return {
            name: _to_store_value(value)
            for name, value in self.model_dump(by_alias=True, exclude_none=True).items()
        }

    @classmethod
    def from_entity(cls, entity: Mapping[str, Any]):
        """
        Create a model instance from an entity returned by the store.

        The SDK returns a dict subclass whose ``metadata`` attribute holds the
        etag and timestamp; plain mappings are accepted too. Typed values the
        SDK hands back as EntityProperty (Edm.Int64 among them) are unwrapped.

        Args:
            entity: Entity mapping as returned by get_entity / query_entities

        Returns:
            Model instance

        Raises:
            ValidationError: If the entity does not fit the model
        """
        data = {name: _from_store_value(value) for name, value in entity.items()}
        metadata = getattr(entity, 'metadata', None) or {}
        if metadata.get('etag') is not None:
            data['etag'] = metadata['etag']
        if metadata.get('timestamp') is not None:
            data['timestamp'] = metadata['timestamp']

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Failed to convert entity to {cls.__name__}: {e}")
            from ..exceptions import ValidationError
            errors = {".".join(str(loc) for loc in err['loc']): err['msg'] for err in e.errors()}
            raise ValidationError(
                f"Failed to convert entity to {cls.__name__}: {e.error_count()} validation error(s)",
                errors=errors,
                original_error=e
            ) from e

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TableEntity):
            return NotImplemented
        return type(self) is type(other) and self.to_entity() == other.to_entity()


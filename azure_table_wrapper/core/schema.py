"""
Schema declarations and construction plans.

A Database subclass declares its tables explicitly as class attributes:

```python
class ShopDatabase(Database):
    Customers = TableField(Customer)
    orders = TableField(Order, name="Orders")
```

The attribute name is the likely table name unless ``name`` overrides it.
When a Database is constructed, the construction plan for its concrete type
(the ordered bindings found on the class and its bases) is fetched from a
ConstructionPlanRegistry, computed there on first use, and applied to the
new instance: every binding gets its own Table accessor assigned into the
instance under the declared attribute.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Generic, Iterator, Optional, Tuple, Type, TypeVar

from ..exceptions import SchemaError
from ..models.entity import TableEntity
from .table import Table

if TYPE_CHECKING:
    from .database import Database

E = TypeVar('E', bound=TableEntity)

logger = logging.getLogger(__name__)


class TableField(Generic[E]):
    """Class-level declaration of one table on a Database schema."""

    def __init__(self, entity_type: Type[E], name: Optional[str] = None):
        """
        Args:
            entity_type: TableEntity subclass stored in the table
            name: Table name, defaults to the attribute name
        """
        if not (isinstance(entity_type, type) and issubclass(entity_type, TableEntity)):
            raise SchemaError(f"TableField entity type must be a TableEntity subclass, got {entity_type!r}")
        self.entity_type = entity_type
        self.name = name
        self.attribute: Optional[str] = None

    def __set_name__(self, owner: type, attribute: str) -> None:
        self.attribute = attribute

    @property
    def likely_name(self) -> str:
        return self.name or self.attribute

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        # Bound accessors live in the instance __dict__ and shadow the declaration
        raise SchemaError(
            f"Table '{self.attribute}' is not bound; construct the database through Database.create()",
            type(instance).__name__
        )

    def __repr__(self) -> str:
        return f"TableField({self.entity_type.__name__}, name={self.likely_name!r})"


@dataclass(frozen=True)
class TableBinding:
    """One step of a construction plan."""
    attribute: str
    likely_name: str
    entity_type: Type[TableEntity]


@dataclass(frozen=True)
class ConstructionPlan:
    """Ordered, immutable list of table bindings for one Database type."""
    database_type: type
    bindings: Tuple[TableBinding, ...]

    @classmethod
    def discover(cls, database_type: type) -> 'ConstructionPlan':
        """
        Collect the TableField declarations of a Database type.

        Bases are visited first so a subclass may redeclare an inherited
        attribute; declaration order is kept otherwise.

        Args:
            database_type: Concrete Database subclass

        Returns:
            ConstructionPlan for the type

        Raises:
            SchemaError: If a table is declared under a name Database itself uses
        """
        from .database import Database

        reserved = set(dir(Database))
        fields: Dict[str, TableField] = {}
        for klass in reversed(database_type.__mro__):
            for attribute, value in vars(klass).items():
                if isinstance(value, TableField):
                    # Database keeps its own state under underscore names
                    if attribute in reserved or attribute.startswith('_'):
                        raise SchemaError(
                            f"Table attribute '{attribute}' clashes with Database.{attribute}; "
                            f"declare it under another attribute and pass name='{attribute}' if needed",
                            database_type.__name__
                        )
                    fields.pop(attribute, None)
                    fields[attribute] = value
                elif attribute in fields:
                    # redefined as something other than a table
                    del fields[attribute]

        bindings = tuple(
            TableBinding(attribute, field.name or attribute, field.entity_type)
            for attribute, field in fields.items()
        )
        logger.debug(f"Discovered {len(bindings)} table(s) on {database_type.__name__}: {[b.attribute for b in bindings]}")
        return cls(database_type, bindings)

    def apply(self, database: 'Database') -> Dict[str, Table]:
        """
        Construct and assign one Table accessor per binding.

        Args:
            database: Database instance being initialized

        Returns:
            Mapping of attribute name to the accessor assigned
        """
        tables: Dict[str, Table] = {}
        for binding in self.bindings:
            table = Table(database, binding.likely_name, binding.entity_type)
            setattr(database, binding.attribute, table)
            tables[binding.attribute] = table
        return tables

    def __len__(self) -> int:
        return len(self.bindings)

    def __iter__(self) -> Iterator[TableBinding]:
        return iter(self.bindings)


class ConstructionPlanRegistry:
    """
    Lookup table of construction plans keyed by concrete Database type.

    Plans are computed on first request and reused afterwards. Two threads
    racing on the first request for a type both compute a plan and the last
    write wins; plans are immutable and equivalent, so instances built from
    either are identical in shape.
    """

    def __init__(self):
        self._plans: Dict[type, ConstructionPlan] = {}

    def plan_for(self, database_type: type) -> ConstructionPlan:
        plan = self._plans.get(database_type)
        if plan is None:
            plan = ConstructionPlan.discover(database_type)
            self._plans[database_type] = plan
        return plan

    def register(self, plan: ConstructionPlan) -> None:
        """Install a precomputed plan, replacing any cached one."""
        self._plans[plan.database_type] = plan

    def clear(self) -> None:
        self._plans.clear()

    def __contains__(self, database_type: type) -> bool:
        return database_type in self._plans

    def __len__(self) -> int:
        return len(self._plans)


default_plan_registry = ConstructionPlanRegistry()

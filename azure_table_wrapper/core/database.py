"""
Database schema base class.

Subclass Database, declare tables with TableField, then construct it with
Database.create():

```python
class ShopDatabase(Database):
    Customers = TableField(Customer)
    Orders = TableField(Order)

db = ShopDatabase.create(connection_string)
db.Customers.insert(Customer(partition_key="emea", row_key="42", name="Ada"))
```

Construction binds one TableServiceClient and applies the type's cached
construction plan, so every declared table is bound, and exists in the
storage account, before the instance is returned.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional, Type, TypeVar

from azure.data.tables import TableClient, TableServiceClient

from ..config import AzureTableConfig
from ..exceptions import ValidationError
from .schema import ConstructionPlan, ConstructionPlanRegistry, default_plan_registry
from .table import Table

D = TypeVar('D', bound='Database')

logger = logging.getLogger(__name__)


class Database:
    """Base class for a declared set of tables sharing one storage account."""

    def __init__(
        self,
        table_service_client: TableServiceClient,
        config: Optional[AzureTableConfig] = None,
        plan_registry: Optional[ConstructionPlanRegistry] = None
    ):
        """Bind the service client and construct every declared table.

        Args:
            table_service_client: azure-data-tables service client
            config: Table naming and logging settings, read from the environment when omitted
            plan_registry: Where construction plans are cached, the module default when omitted

        Raises:
            azure.core.exceptions.AzureError: If a table existence check or creation fails
        """
        self._config = config if config is not None else AzureTableConfig()
        if self._config.enable_debug_logging:
            logging.getLogger(__name__.split('.')[0]).setLevel(logging.DEBUG)

        self._table_service_client = table_service_client
        registry = plan_registry if plan_registry is not None else default_plan_registry
        self._construction_plan = registry.plan_for(type(self))
        self._tables = self._construction_plan.apply(self)
        logger.info(f"Initialized {type(self).__name__} with tables: {[t.table_name for t in self._tables.values()]}")

    @classmethod
    def create(
        cls: Type[D],
        connection_string: str,
        config: Optional[AzureTableConfig] = None,
        plan_registry: Optional[ConstructionPlanRegistry] = None
    ) -> D:
        """
        Connect to a storage account and return a ready database.

        Args:
            connection_string: Storage account connection string
            config: Optional settings (table prefix, debug logging)
            plan_registry: Optional construction plan registry

        Returns:
            Database instance with every declared table bound

        Raises:
            ValueError: If the SDK cannot parse the connection string (unmodified)
        """
        table_service_client = TableServiceClient.from_connection_string(conn_str=connection_string)
        return cls(table_service_client, config=config, plan_registry=plan_registry)

    @classmethod
    def from_config(
        cls: Type[D],
        config: AzureTableConfig,
        plan_registry: Optional[ConstructionPlanRegistry] = None
    ) -> D:
        """Create a database from the connection string held by ``config``."""
        if not config.connection_string:
            raise ValidationError(
                "No connection string configured; set AZURE_STORAGE_CONNECTION_STRING",
                errors={'connection_string': 'missing'}
            )
        return cls.create(config.connection_string, config=config, plan_registry=plan_registry)

    @property
    def config(self) -> AzureTableConfig:
        return self._config

    @property
    def table_service_client(self) -> TableServiceClient:
        return self._table_service_client

    @property
    def construction_plan(self) -> ConstructionPlan:
        return self._construction_plan

    @property
    def tables(self) -> Mapping[str, Table]:
        """Bound tables keyed by attribute name."""
        return MappingProxyType(self._tables)

    def table_exists(self, name: str) -> bool:
        tables = self._table_service_client.query_tables("TableName eq @name", parameters={'name': name})
        exists = any(True for _ in tables)
        logger.debug(f"Table '{name}' exists: {exists}")
        return exists

    def create_table(self, name: str) -> TableClient:
        """Create a table unless it exists; errors from the SDK propagate unmodified."""
        table_client = self._table_service_client.create_table_if_not_exists(table_name=name)
        logger.info(f"Created table '{name}'")
        return table_client

    def get_table_client(self, name: str) -> TableClient:
        return self._table_service_client.get_table_client(table_name=name)

    def close(self) -> None:
        """Close the service client's transport."""
        self._table_service_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

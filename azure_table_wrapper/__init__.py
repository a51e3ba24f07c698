"""
Azure Table Wrapper

A minimal object-mapping layer over Azure Table Storage using azure-data-tables
and Pydantic: declare a database as a set of typed tables, get missing tables
created on first use, and work with entities through CRUD and partition queries.
"""

from .config import AzureTableConfig
from .exceptions import (
    AzureStorageError,
    DeleteOperationError,
    EntityNotFoundError,
    InsertOperationError,
    RetrieveOperationError,
    SchemaError,
    StorageOperationError,
    UpdateOperationError,
    ValidationError,
)
from .models import (
    OperationKind,
    SUCCESS_STATUS_CODES,
    TableEntity,
    TableQuery,
    TableResult,
)
from .core import (
    ConstructionPlan,
    ConstructionPlanRegistry,
    Database,
    EntityQuery,
    Table,
    TableField,
    TableGateway,
    default_plan_registry,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "AzureTableConfig",

    # Exceptions
    "AzureStorageError",
    "StorageOperationError",
    "InsertOperationError",
    "RetrieveOperationError",
    "UpdateOperationError",
    "DeleteOperationError",
    "EntityNotFoundError",
    "SchemaError",
    "ValidationError",

    # Models
    "TableEntity",
    "TableQuery",
    "OperationKind",
    "SUCCESS_STATUS_CODES",
    "TableResult",

    # Schema and tables
    "Database",
    "TableField",
    "Table",
    "EntityQuery",
    "TableGateway",
    "ConstructionPlan",
    "ConstructionPlanRegistry",
    "default_plan_registry",
]

# Base exception class
from .base import AzureStorageError

from .domain_exceptions import (
    DeleteOperationError,
    EntityNotFoundError,
    InsertOperationError,
    RetrieveOperationError,
    SchemaError,
    StorageOperationError,
    UpdateOperationError,
    ValidationError,
)

__all__ = [
    # Base exception
    "AzureStorageError",

    # Operation-kind failures
    "StorageOperationError",
    "InsertOperationError",
    "RetrieveOperationError",
    "UpdateOperationError",
    "DeleteOperationError",

    # Domain exceptions (alphabetically ordered)
    "EntityNotFoundError",
    "SchemaError",
    "ValidationError",
]

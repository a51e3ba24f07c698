"""
Domain-Specific Exceptions for the Azure Table Wrapper

This module holds every exception that extends the base AzureStorageError.

Organized by category:
1. Table Operation Errors (one kind per operation, carrying the store's status code)
2. Lookup Errors
3. Schema and Validation Errors
"""

from typing import Any, Dict, Optional

from .base import AzureStorageError


# =============================================================================
# Table Operation Errors
# =============================================================================

class StorageOperationError(AzureStorageError):
    """Raised when the table store answers an entity operation with a non-success status.

    Attributes:
        operation: Operation kind tag ("insert", "retrieve", "update", "delete")
        status_code: HTTP status code reported by the store, None when no response was received
        table_name: Name of the table the operation ran against
    """

    operation: str = "unknown"

    def __init__(
        self,
        message: str,
        status_code: Optional[int],
        table_name: Optional[str] = None,
        key: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        """Initialize operation error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code reported by the store
            table_name: Name of the table
            key: PartitionKey/RowKey of the entity involved, if known
            original_error: The SDK exception that carried the status code
        """
        self.status_code = status_code
        self.table_name = table_name
        self.key = key
        context: Dict[str, Any] = {
            'operation': self.operation,
            'status_code': status_code,
        }
        if table_name:
            context['table_name'] = table_name
        if key:
            context['key'] = key
        super().__init__(message, original_error, context)


class InsertOperationError(StorageOperationError):
    """Raised when an insert is not answered with 201 Created or 204 No Content."""

    operation = "insert"


class RetrieveOperationError(StorageOperationError):
    """Raised when a point retrieve is not answered with 200 OK."""

    operation = "retrieve"


class UpdateOperationError(StorageOperationError):
    """Raised when a replace is not answered with 204 No Content.

    Kept distinct from DeleteOperationError so callers can tell a rejected
    update from a rejected delete.
    """

    operation = "update"


class DeleteOperationError(StorageOperationError):
    """Raised when a delete is not answered with 204 No Content."""

    operation = "delete"


# =============================================================================
# Lookup Errors
# =============================================================================

class EntityNotFoundError(AzureStorageError):
    """Raised when a partition scan finds no matching entity.

    Used for:
    - Table.first() on a partition with no entities
    - EntityQuery.first() on an empty result
    """

    def __init__(self, table_name: str, key: dict, original_error: Optional[Exception] = None):
        """Initialize entity not found error.

        Args:
            table_name: Name of the table
            key: The key (or partial key) that was not found
            original_error: The original exception that caused this error
        """
        self.table_name = table_name
        self.key = key
        message = f"Entity not found in table '{table_name}' with key: {key}"
        context = {
            'table_name': table_name,
            'key': key
        }
        super().__init__(message, original_error, context)


# =============================================================================
# Schema and Validation Errors
# =============================================================================

class SchemaError(AzureStorageError):
    """Raised when a Database schema declaration is unusable.

    Used for:
    - TableField declared with an entity type that is not a TableEntity
    - Accessing a table attribute on a Database that was never initialized
    """

    def __init__(self, message: str, schema_name: Optional[str] = None, original_error: Optional[Exception] = None):
        self.schema_name = schema_name
        context = {}
        if schema_name:
            context['schema'] = schema_name
        super().__init__(message, original_error, context)


class ValidationError(AzureStorageError):
    """Raised when data validation fails.

    Used for:
    - Pydantic model validation failures while converting store entities
    - Update/delete requested for an entity carrying no ETag
    - Missing configuration values
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)

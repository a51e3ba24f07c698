"""
Thin Table Gateway

This module provides a lightweight wrapper around one azure-data-tables
TableClient. The gateway:

1. Issues exactly one SDK call per entity operation
2. Captures the HTTP status code the store answered with
3. Reports the outcome as a TableResult instead of deciding success itself

The SDK raises HttpResponseError subclasses for most non-2xx answers and
returns silently for some (delete of a missing entity answers 404 without
raising). Capturing the raw status through azure-core's ``raw_response_hook``
lets the Table accessor apply the exact success codes of each operation
whichever path the SDK takes.

Transport failures that never produced a response (ServiceRequestError and
friends) are not status codes and propagate unmodified.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Optional

from azure.core import MatchConditions
from azure.core.exceptions import HttpResponseError
from azure.data.tables import TableClient, UpdateMode

from ..exceptions import (
    DeleteOperationError,
    InsertOperationError,
    RetrieveOperationError,
    StorageOperationError,
    UpdateOperationError,
)
from ..models.results import OperationKind, TableResult

logger = logging.getLogger(__name__)


_OPERATION_ERRORS = {
    OperationKind.INSERT: (InsertOperationError, "Error during inserting into table."),
    OperationKind.RETRIEVE: (RetrieveOperationError, "Error during get."),
    OperationKind.UPDATE: (UpdateOperationError, "Can't update entity."),
    OperationKind.DELETE: (DeleteOperationError, "Can't delete entity."),
}


def map_status_error(
    operation: OperationKind,
    status_code: Optional[int],
    table_name: str,
    key: Optional[Dict[str, Any]] = None,
    original_error: Optional[Exception] = None
) -> StorageOperationError:
    """Map a non-success status code to the operation-kind exception.

    Args:
        operation: The operation that failed
        status_code: Status code reported by the store
        table_name: The table name
        key: Optional PartitionKey/RowKey for context
        original_error: The SDK exception, when the SDK raised one

    Returns:
        InsertOperationError, RetrieveOperationError, UpdateOperationError
        or DeleteOperationError
    """
    error_class, prefix = _OPERATION_ERRORS[OperationKind(operation)]
    return error_class(f"{prefix} {status_code}", status_code, table_name, key, original_error=original_error)


class StatusCapture:
    """Callable handed to azure-core as ``raw_response_hook``.

    Records the status code of the last response that went through the
    pipeline.
    """

    def __init__(self):
        self.status_code: Optional[int] = None

    def __call__(self, pipeline_response) -> None:
        self.status_code = pipeline_response.http_response.status_code


class TableGateway:
    """
    Thin gateway for entity operations on one table.

    Entity operations return a TableResult and never raise for a status code;
    deciding what counts as success belongs to the caller. Query methods pass
    straight through to the SDK's paged iterators.
    """

    def __init__(self, table_client: TableClient, table_name: str):
        """Initialize table gateway.

        Args:
            table_client: azure-data-tables client bound to the table
            table_name: Name of the table, used for logging and error context
        """
        self.table_client = table_client
        self.table_name = table_name

    def execute(self, operation: OperationKind, call: Callable[..., Any], *args, **kwargs) -> TableResult:
        """
        Run one SDK call and capture the status the store answered with.

        Args:
            operation: Operation kind tag for the result
            call: Bound TableClient method
            *args, **kwargs: Arguments for the call

        Returns:
            TableResult holding the status code and either the SDK return value
            or the HttpResponseError it raised
        """
        capture = StatusCapture()
        try:
            result = call(*args, raw_response_hook=capture, **kwargs)
        except HttpResponseError as e:
            status_code = e.status_code if e.status_code is not None else capture.status_code
            logger.debug(f"{operation.value} on {self.table_name} answered {status_code}: {e.reason}")
            return TableResult(operation, status_code, error=e)
        return TableResult(operation, capture.status_code, result)

    def create_entity(self, entity: Dict[str, Any]) -> TableResult:
        return self.execute(OperationKind.INSERT, self.table_client.create_entity, entity=entity)

    def get_entity(self, partition_key: str, row_key: str, select: Optional[Iterable[str]] = None) -> TableResult:
        kwargs: Dict[str, Any] = {}
        if select:
            kwargs['select'] = list(select)
        return self.execute(
            OperationKind.RETRIEVE, self.table_client.get_entity, partition_key, row_key, **kwargs
        )

    def update_entity(self, entity: Dict[str, Any], etag: str) -> TableResult:
        """Replace an entity, guarded by its etag."""
        return self.execute(
            OperationKind.UPDATE,
            self.table_client.update_entity,
            entity=entity,
            mode=UpdateMode.REPLACE,
            etag=etag,
            match_condition=MatchConditions.IfNotModified
        )

    def delete_entity(self, partition_key: str, row_key: str, etag: str) -> TableResult:
        """Delete an entity, guarded by its etag."""
        return self.execute(
            OperationKind.DELETE,
            self.table_client.delete_entity,
            partition_key,
            row_key,
            etag=etag,
            match_condition=MatchConditions.IfNotModified
        )

    def list_entities(self, **kwargs):
        """
        List every entity in the table.

        ⚠️  Full-table scan: every page of the table is transferred.

        Args:
            **kwargs: select / results_per_page for the SDK

        Returns:
            SDK ItemPaged iterator
        """
        return self.table_client.list_entities(**kwargs)

    def query_entities(self, query_filter: str, **kwargs):
        """
        Run an OData filter against the table.

        Args:
            query_filter: OData filter expression
            **kwargs: parameters / select / results_per_page for the SDK

        Returns:
            SDK ItemPaged iterator
        """
        return self.table_client.query_entities(query_filter, **kwargs)

"""
Typed table accessor.

A Table is bound to exactly one named table and one TableEntity subclass.
Construction makes sure the backing table exists (created if absent) before
any entity operation can be issued. Every entity operation is a single
blocking call; any status outside the operation's success set becomes an
operation-kind exception immediately. Nothing is retried.
"""

import logging
from itertools import islice
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Iterator, Optional, Tuple, Type, TypeVar

from azure.data.tables import TableClient

from ..exceptions import EntityNotFoundError, ValidationError
from ..models.entity import TableEntity
from ..models.query import TableQuery
from ..models.results import OperationKind, TableResult
from .table_gateway import TableGateway, map_status_error

if TYPE_CHECKING:
    from .database import Database

E = TypeVar('E', bound=TableEntity)

logger = logging.getLogger(__name__)


class EntityQuery(Generic[E]):
    """
    Lazy, restartable query over one table.

    Nothing is sent to the store until the query is iterated, and every
    iteration sends it again, so results are never cached. Builder methods
    return a new query and leave the receiver untouched.

    Example:
        adults = db.Customers.query().where("Age ge @age", age=18).select("PartitionKey", "RowKey", "Age")
        for customer in adults.take(10):
            ...
    """

    def __init__(
        self,
        table: 'Table[E]',
        query: Optional[TableQuery] = None,
        predicates: Tuple[Callable[[E], bool], ...] = ()
    ):
        self._table = table
        self._query = query or TableQuery()
        self._predicates = predicates

    @property
    def table_query(self) -> TableQuery:
        """Structured query sent to the store (client-side predicates excluded)."""
        return self._query

    def _copy(self, predicates: Optional[Tuple[Callable[[E], bool], ...]] = None, **changes) -> 'EntityQuery[E]':
        query = self._query.model_copy(update=changes) if changes else self._query
        return EntityQuery(self._table, query, self._predicates if predicates is None else predicates)

    def where(self, query_filter: str, **parameters: Any) -> 'EntityQuery[E]':
        """
        Narrow the query with an OData filter, ANDed with any existing filter.

        Args:
            query_filter: OData expression, values bound through @name placeholders
            **parameters: Values for the placeholders

        Raises:
            ValueError: If a placeholder is rebound to a different value
        """
        merged = dict(self._query.parameters)
        for name, value in parameters.items():
            if name in merged and merged[name] != value:
                raise ValueError(f"Query parameter '{name}' is already bound to {merged[name]!r}")
            merged[name] = value

        if self._query.query_filter:
            query_filter = f"({self._query.query_filter}) and ({query_filter})"
        return self._copy(query_filter=query_filter, parameters=merged)

    def select(self, *names: str) -> 'EntityQuery[E]':
        """Return only the named properties; the entity model must accept the projection."""
        return self._copy(select=list(names) or None)

    def page_size(self, results_per_page: int) -> 'EntityQuery[E]':
        if results_per_page <= 0:
            raise ValueError("Page size must be positive")
        return self._copy(results_per_page=results_per_page)

    def take(self, count: int) -> 'EntityQuery[E]':
        if count <= 0:
            raise ValueError("Count must be positive")
        return self._copy(top=count)

    def matching(self, predicate: Callable[[E], bool]) -> 'EntityQuery[E]':
        """Filter entities client-side after they are read from the store."""
        return self._copy(predicates=self._predicates + (predicate,))

    def first(self) -> E:
        for entity in self:
            return entity
        raise EntityNotFoundError(self._table.table_name, {'filter': self._query.query_filter})

    def __iter__(self) -> Iterator[E]:
        if not self._predicates:
            return self._table.execute_query(self._query)
        return self._filtered()

    def _filtered(self) -> Iterator[E]:
        entities = self._table.execute_query(self._query.model_copy(update={'top': None}))
        matches = (entity for entity in entities if all(predicate(entity) for predicate in self._predicates))
        if self._query.top:
            matches = islice(matches, self._query.top)
        yield from matches

    def __repr__(self) -> str:
        return f"EntityQuery(table={self._table.table_name!r}, query={self._query!r}, predicates={len(self._predicates)})"


class Table(Generic[E]):
    """
    Typed CRUD and query operations on one table.

    Success codes per operation:
    - insert: 201 Created or 204 No Content
    - get: 200 OK
    - update, delete: 204 No Content
    """

    def __init__(self, database: 'Database', likely_table_name: str, entity_type: Type[E]):
        """Bind to a table, creating it if it does not exist yet.

        Args:
            database: Owning database, provides the service client
            likely_table_name: Declared table name
            entity_type: TableEntity subclass stored in the table

        Raises:
            azure.core.exceptions.AzureError: From the existence check or table creation, unmodified
        """
        self._database = database
        self._likely_table_name = likely_table_name
        self._entity_type = entity_type
        self._table_name: Optional[str] = None

        if not database.table_exists(self.table_name):
            database.create_table(self.table_name)
        self._table_client = database.get_table_client(self.table_name)
        self._gateway = TableGateway(self._table_client, self.table_name)

    @property
    def table_name(self) -> str:
        """Resolved table name: the likely name with the configured prefix."""
        if self._table_name is None:
            self._table_name = self._database.config.get_table_name(self._likely_table_name)
        return self._table_name

    @property
    def likely_table_name(self) -> str:
        return self._likely_table_name

    @property
    def database(self) -> 'Database':
        return self._database

    @property
    def entity_type(self) -> Type[E]:
        return self._entity_type

    @property
    def table_client(self) -> TableClient:
        """The azure-data-tables client bound to this table."""
        return self._table_client

    @property
    def gateway(self) -> TableGateway:
        return self._gateway

    def _raise_failure(self, result: TableResult, partition_key: str, row_key: str):
        key = {'PartitionKey': partition_key, 'RowKey': row_key}
        error = map_status_error(result.operation, result.status_code, self.table_name, key, result.error)
        logger.error(f"{result.operation.value} failed on {self.table_name}: {error}")
        raise error from result.error

    def _require_etag(self, entity: E, operation: OperationKind) -> None:
        if not entity.etag:
            raise ValidationError(
                f"Cannot {operation.value} entity {entity.key} in '{self.table_name}' without an ETag; read it first",
                errors={'etag': 'missing'}
            )

    @staticmethod
    def _store_etag(entity: E, metadata: Optional[Dict[str, Any]]) -> None:
        if metadata and metadata.get('etag'):
            entity.etag = metadata['etag']

    def insert(self, entity: E) -> None:
        """
        Insert a new entity.

        The etag returned by the store is written back onto ``entity``.

        Raises:
            InsertOperationError: Status other than 201/204 (409 when the key exists)
        """
        result = self._gateway.create_entity(entity.to_entity())
        if not result.succeeded:
            self._raise_failure(result, entity.partition_key, entity.row_key)
        self._store_etag(entity, result.result)
        logger.info(f"Inserted entity into {self.table_name}: {entity.key}")

    def get(self, partition_key: str, row_key: str) -> E:
        """
        Retrieve one entity by its key.

        Raises:
            RetrieveOperationError: Status other than 200 (404 when absent)
            ValidationError: If the stored entity does not fit the model
        """
        result = self._gateway.get_entity(partition_key, row_key)
        if not result.succeeded:
            self._raise_failure(result, partition_key, row_key)
        logger.debug(f"Retrieved entity from {self.table_name}: {(partition_key, row_key)}")
        return self._entity_type.from_entity(result.result)

    def try_get(self, partition_key: str, row_key: str) -> Optional[E]:
        """Like get(), but return None when the entity does not exist."""
        result = self._gateway.get_entity(partition_key, row_key)
        if result.status_code == 404:
            return None
        if not result.succeeded:
            self._raise_failure(result, partition_key, row_key)
        return self._entity_type.from_entity(result.result)

    def update(self, entity: E) -> None:
        """
        Replace an entity read earlier.

        The entity's etag must still match the stored one; the new etag is
        written back onto ``entity``.

        Raises:
            ValidationError: If the entity has no etag
            UpdateOperationError: Status other than 204 (412 on a stale etag, 404 when absent)
        """
        self._require_etag(entity, OperationKind.UPDATE)
        result = self._gateway.update_entity(entity.to_entity(), entity.etag)
        if not result.succeeded:
            self._raise_failure(result, entity.partition_key, entity.row_key)
        self._store_etag(entity, result.result)
        logger.info(f"Updated entity in {self.table_name}: {entity.key}")

    def delete(self, entity: E) -> None:
        """
        Delete an entity read earlier.

        Raises:
            ValidationError: If the entity has no etag
            DeleteOperationError: Status other than 204 (412 on a stale etag, 404 when absent)
        """
        self._require_etag(entity, OperationKind.DELETE)
        result = self._gateway.delete_entity(entity.partition_key, entity.row_key, entity.etag)
        if not result.succeeded:
            self._raise_failure(result, entity.partition_key, entity.row_key)
        logger.info(f"Deleted entity from {self.table_name}: {entity.key}")

    def query(self) -> EntityQuery[E]:
        """Full, unfiltered query over the table; narrow it with the EntityQuery builders."""
        return EntityQuery(self)

    def first(self, partition_key: str) -> E:
        """
        First entity, in store order, whose partition key matches case-insensitively.

        Raises:
            EntityNotFoundError: If no entity matches
        """
        for entity in self.all(partition_key):
            return entity
        raise EntityNotFoundError(self.table_name, {'PartitionKey': partition_key})

    def all(self, partition_key: str) -> EntityQuery[E]:
        """
        Every entity whose partition key matches case-insensitively.

        The store compares keys case-sensitively, so the table is read in full
        and matched client-side.
        """
        wanted = partition_key.casefold()
        return self.query().matching(lambda entity: entity.partition_key.casefold() == wanted)

    def execute_query(self, query: TableQuery) -> Iterator[E]:
        """
        Stream the entities matching a structured query.

        Paging is handled by the SDK iterator. The store is contacted when
        iteration starts.

        Args:
            query: Filter, parameters, projection and page size

        Yields:
            Entities converted to the table's entity type
        """
        kwargs = query.to_kwargs()
        if query.is_filtered:
            query_filter = kwargs.pop('query_filter')
            logger.debug(f"Querying {self.table_name}: {query_filter}")
            pages = self._gateway.query_entities(query_filter, **kwargs)
        else:
            logger.debug(f"Listing all entities of {self.table_name}")
            pages = self._gateway.list_entities(**kwargs)

        entities = (self._entity_type.from_entity(entity) for entity in pages)
        if query.top:
            entities = islice(entities, query.top)
        yield from entities

    def __repr__(self) -> str:
        return f"Table({self._entity_type.__name__}, table_name={self.table_name!r})"

"""
In-memory stand-in for the azure-data-tables service and table clients.

Only the call shapes used by the wrapper are implemented. Status codes follow
the Table service REST API: create answers 204 (the SDK sends
``Prefer: return-no-content``), get answers 200, replace and delete answer
204, missing entities 404, duplicate keys 409 and stale etags 412. Like the
real SDK, delete of a missing entity answers 404 without raising.
"""

import itertools
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from azure.core import MatchConditions
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)


class FakeHttpResponse:
    def __init__(self, status_code: int):
        self.status_code = status_code


class FakePipelineResponse:
    def __init__(self, status_code: int):
        self.http_response = FakeHttpResponse(status_code)


class StoredEntity(dict):
    """Entity as returned by the SDK: a dict plus a ``metadata`` attribute."""

    def __init__(self, properties: Dict[str, Any], metadata: Dict[str, Any]):
        super().__init__(properties)
        self.metadata = metadata


def http_error(status_code: int, reason: str, error_class=HttpResponseError, error_code: Optional[str] = None) -> HttpResponseError:
    error = error_class(message=f"Operation returned an invalid status '{reason}'")
    error.status_code = status_code
    error.reason = reason
    error.error_code = error_code
    return error


def _respond(hook: Optional[Callable], status_code: int) -> None:
    if hook is not None:
        hook(FakePipelineResponse(status_code))


_CLAUSE = re.compile(r"^\(*\s*(\w+)\s+(eq|ne|gt|ge|lt|le)\s+@(\w+)\s*\)*$")
_OPERATORS = {
    'eq': lambda a, b: a == b,
    'ne': lambda a, b: a != b,
    'gt': lambda a, b: a > b,
    'ge': lambda a, b: a >= b,
    'lt': lambda a, b: a < b,
    'le': lambda a, b: a <= b,
}


def compile_filter(query_filter: str, parameters: Dict[str, Any]) -> Callable[[Dict[str, Any]], bool]:
    """Compile a conjunction of ``Property op @param`` clauses."""
    checks = []
    for clause in re.split(r"\)?\s+and\s+\(?", query_filter.strip()):
        match = _CLAUSE.match(clause.strip())
        if match is None:
            raise http_error(400, f"Unsupported filter clause: {clause}")
        prop, op, param = match.groups()
        checks.append((prop, _OPERATORS[op], parameters[param]))

    def predicate(properties: Dict[str, Any]) -> bool:
        return all(prop in properties and compare(properties[prop], value) for prop, compare, value in checks)

    return predicate


@dataclass
class StoredRow:
    properties: Dict[str, Any]
    etag: str
    timestamp: datetime

    def as_entity(self, select: Optional[List[str]] = None) -> StoredEntity:
        properties = dict(self.properties)
        if select:
            properties = {k: v for k, v in properties.items() if k in select}
        return StoredEntity(properties, {'etag': self.etag, 'timestamp': self.timestamp})


@dataclass
class FakeTableServiceClient:
    """Service client holding every table in memory."""
    tables: Dict[str, Dict[Tuple[str, str], StoredRow]] = field(default_factory=dict)
    create_calls: List[str] = field(default_factory=list)
    exists_calls: List[str] = field(default_factory=list)
    scans: List[Dict[str, Any]] = field(default_factory=list)
    closed: bool = False
    _etags: Any = field(default_factory=lambda: itertools.count(1))

    def next_etag(self) -> str:
        return f'W/"datetime\'{next(self._etags)}\'"'

    def query_tables(self, query_filter: str, parameters: Optional[Dict[str, Any]] = None, **kwargs):
        name = (parameters or {})['name']
        self.exists_calls.append(name)
        return iter([{'name': name}] if name in self.tables else [])

    def create_table_if_not_exists(self, table_name: str, **kwargs) -> 'FakeTableClient':
        self.create_calls.append(table_name)
        self.tables.setdefault(table_name, {})
        return self.get_table_client(table_name)

    def get_table_client(self, table_name: str, **kwargs) -> 'FakeTableClient':
        return FakeTableClient(self, table_name)

    def close(self) -> None:
        self.closed = True


class FakeTableClient:
    """Table client bound to one table of a FakeTableServiceClient."""

    def __init__(self, service: FakeTableServiceClient, table_name: str):
        self.service = service
        self.table_name = table_name

    @property
    def rows(self) -> Dict[Tuple[str, str], StoredRow]:
        return self.service.tables[self.table_name]

    def _new_row(self, entity: Dict[str, Any]) -> StoredRow:
        return StoredRow(dict(entity), self.service.next_etag(), datetime.now(timezone.utc))

    def create_entity(self, entity: Dict[str, Any], raw_response_hook=None, **kwargs) -> Dict[str, Any]:
        key = (entity['PartitionKey'], entity['RowKey'])
        if key in self.rows:
            _respond(raw_response_hook, 409)
            raise http_error(409, "Conflict", ResourceExistsError, "EntityAlreadyExists")
        row = self._new_row(entity)
        self.rows[key] = row
        _respond(raw_response_hook, 204)
        return {'etag': row.etag, 'date': row.timestamp}

    def get_entity(self, partition_key: str, row_key: str, raw_response_hook=None, select=None, **kwargs) -> StoredEntity:
        row = self.rows.get((partition_key, row_key))
        if row is None:
            _respond(raw_response_hook, 404)
            raise http_error(404, "Not Found", ResourceNotFoundError)
        _respond(raw_response_hook, 200)
        return row.as_entity(select)

    def _check_etag(self, row: StoredRow, etag: Optional[str], match_condition, hook) -> None:
        if match_condition == MatchConditions.IfNotModified and etag != row.etag:
            _respond(hook, 412)
            raise http_error(412, "Precondition Failed", ResourceModifiedError, "UpdateConditionNotSatisfied")

    def update_entity(self, entity: Dict[str, Any], mode=None, etag=None, match_condition=None,
                      raw_response_hook=None, **kwargs) -> Dict[str, Any]:
        key = (entity['PartitionKey'], entity['RowKey'])
        row = self.rows.get(key)
        if row is None:
            _respond(raw_response_hook, 404)
            raise http_error(404, "Not Found", ResourceNotFoundError)
        self._check_etag(row, etag, match_condition, raw_response_hook)
        new_row = self._new_row(entity)
        self.rows[key] = new_row
        _respond(raw_response_hook, 204)
        return {'etag': new_row.etag, 'date': new_row.timestamp}

    def delete_entity(self, partition_key: str, row_key: str, etag=None, match_condition=None,
                      raw_response_hook=None, **kwargs) -> None:
        key = (partition_key, row_key)
        row = self.rows.get(key)
        if row is None:
            _respond(raw_response_hook, 404)
            return None
        self._check_etag(row, etag, match_condition, raw_response_hook)
        del self.rows[key]
        _respond(raw_response_hook, 204)
        return None

    def list_entities(self, select=None, results_per_page=None, **kwargs):
        self.service.scans.append({'table': self.table_name, 'select': select, 'results_per_page': results_per_page})
        return (row.as_entity(select) for row in list(self.rows.values()))

    def query_entities(self, query_filter: str, parameters=None, select=None, results_per_page=None, **kwargs):
        self.service.scans.append({
            'table': self.table_name,
            'filter': query_filter,
            'parameters': parameters,
            'select': select,
            'results_per_page': results_per_page,
        })
        predicate = compile_filter(query_filter, parameters or {})
        return (row.as_entity(select) for row in list(self.rows.values()) if predicate(row.properties))

from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, FrozenSet, Optional


class OperationKind(str, Enum):
    """Kind of entity operation issued against a table."""
    INSERT = "insert"
    RETRIEVE = "retrieve"
    UPDATE = "update"
    DELETE = "delete"


SUCCESS_STATUS_CODES: Dict[OperationKind, FrozenSet[int]] = {
    OperationKind.INSERT: frozenset({HTTPStatus.CREATED, HTTPStatus.NO_CONTENT}),
    OperationKind.RETRIEVE: frozenset({HTTPStatus.OK}),
    OperationKind.UPDATE: frozenset({HTTPStatus.NO_CONTENT}),
    OperationKind.DELETE: frozenset({HTTPStatus.NO_CONTENT}),
}


@dataclass(frozen=True)
class TableResult:
    """Outcome of one entity operation as reported by the store.

    status_code is None when the SDK returned without a response reaching the
    status hook.
    """
    operation: OperationKind
    status_code: Optional[int]
    result: Any = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.status_code in SUCCESS_STATUS_CODES[self.operation]

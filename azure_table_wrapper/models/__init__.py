from .entity import TableEntity
from .query import TableQuery
from .results import SUCCESS_STATUS_CODES, OperationKind, TableResult

__all__ = [
    # Entity base model
    "TableEntity",

    # Query description
    "TableQuery",

    # Operation outcome
    "OperationKind",
    "SUCCESS_STATUS_CODES",
    "TableResult",
]

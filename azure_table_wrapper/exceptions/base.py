from http import HTTPStatus
from typing import Any, Dict, Optional


def describe_status(status_code: int) -> str:
    """Render a status code with its reason phrase, e.g. ``412 Precondition Failed``."""
    try:
        return f"{status_code} {HTTPStatus(status_code).phrase}"
    except ValueError:
        return str(status_code)


class AzureStorageError(Exception):
    """Base exception for all Azure table wrapper errors.

    Errors raised from a store response carry its HTTP status code and, when
    the service sent one, its error code (``EntityAlreadyExists``,
    ``UpdateConditionNotSatisfied``, ...) taken from the azure-core exception.

    Attributes:
        message: Human-readable error message
        original_error: The azure-core exception that caused this error (if any)
        context: Additional context information about the error
        status_code: HTTP status code of the store response, None when there was none
        error_code: Storage service error code of the response, None when absent
    """

    status_code: Optional[int] = None

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        self.error_code: Optional[str] = getattr(original_error, 'error_code', None)
        super().__init__(message)

    def __str__(self) -> str:
        error_str = self.message
        if self.status_code is not None:
            error_str += f" [HTTP {describe_status(self.status_code)}]"
        if self.error_code:
            error_str += f" [{self.error_code}]"
        context = {k: v for k, v in self.context.items() if k != 'status_code'}
        if context:
            context_str = ", ".join(f"{k}={v}" for k, v in context.items())
            error_str += f" (Context: {context_str})"
        return error_str

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code!r}, "
            f"error_code={self.error_code!r}, context={self.context!r})"
        )

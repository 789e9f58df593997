"""Failure kinds shared by the storage layer and the HTTP layer.

Storage operations never raise for filesystem problems. They return a
``Result`` that either carries a payload or an ``ErrorKind``, and the route
handlers hand any failure to ``error_response``, the single place where a
failure becomes a client-visible status and message.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from fastapi import status
from fastapi.responses import PlainTextResponse

from logger_config import setup_logger

logger = setup_logger()

T = TypeVar("T")


class ErrorKind(Enum):
    ROUTE_NOT_MATCHED = "route_not_matched"
    FILE_OPERATION = "file_operation"
    INVALID_BODY = "invalid_body"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    MISSING_HEADER = "missing_header"
    UNHANDLED = "unhandled"


ERROR_RESPONSES = {
    ErrorKind.ROUTE_NOT_MATCHED: (status.HTTP_404_NOT_FOUND, "Not Found"),
    ErrorKind.FILE_OPERATION: (status.HTTP_500_INTERNAL_SERVER_ERROR, "File operation error"),
    ErrorKind.INVALID_BODY: (status.HTTP_400_BAD_REQUEST, "Invalid body"),
    ErrorKind.PAYLOAD_TOO_LARGE: (status.HTTP_400_BAD_REQUEST, "Payload too large"),
    ErrorKind.MISSING_HEADER: (status.HTTP_400_BAD_REQUEST, "Missing request header 'filename'"),
    ErrorKind.UNHANDLED: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"),
}


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a storage operation: a value, or the kind of failure."""

    value: Optional[T] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind) -> "Result[T]":
        return cls(error=kind)

    @property
    def failed(self) -> bool:
        return self.error is not None


def error_response(kind: ErrorKind) -> PlainTextResponse:
    """Translate a failure kind into the response sent to the client."""
    status_code, message = ERROR_RESPONSES.get(kind, ERROR_RESPONSES[ErrorKind.UNHANDLED])
    if kind is ErrorKind.UNHANDLED:
        logger.error(f"Unhandled error translated to {status_code}")
    else:
        logger.debug(f"Translated {kind.value} to {status_code} {message!r}")
    return PlainTextResponse(message, status_code=status_code)

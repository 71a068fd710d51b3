"""Status codes and the exception raised when an operation fails."""

from __future__ import annotations

import enum


class Status(enum.Enum):
    """Outcome of an operation; every member except SUCCESS names a failure."""

    SUCCESS = enum.auto()
    INVALID_ARGS = enum.auto()
    INVALID_PARAM_IN_JSON = enum.auto()
    OUT_OF_RANGE_IN_JSON = enum.auto()
    TYPE_CONFLICT_IN_JSON = enum.auto()
    INVALID_VALUE_IN_JSON = enum.auto()
    INVALID_METRIC_TYPE = enum.auto()
    INVALID_INDEX_ERROR = enum.auto()
    EMPTY_INDEX = enum.auto()
    NOT_IMPLEMENTED = enum.auto()
    INDEX_NOT_TRAINED = enum.auto()
    INDEX_ALREADY_TRAINED = enum.auto()
    FAISS_INNER_ERROR = enum.auto()
    ANNOY_INNER_ERROR = enum.auto()
    HNSW_INNER_ERROR = enum.auto()
    DISKANN_INNER_ERROR = enum.auto()
    DISKANN_FILE_ERROR = enum.auto()
    MALLOC_ERROR = enum.auto()
    ARITHMETIC_OVERFLOW = enum.auto()


class KnowhereError(Exception):
    """Error carrying a message and the status that describes it."""

    def __init__(self, message: str, status: Status = Status.INVALID_ARGS) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return self.message


def located_message(message: str, func_name: str, file: str, line: int) -> str:
    """Prefix ``message`` with the function, file base name and line it came from."""
    filename = file.rsplit("/", 1)[-1]
    return f"Error in {func_name} at {filename}:{line}: {message}"
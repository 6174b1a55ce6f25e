"""Ingestion exceptions and the error report record returned alongside the index"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Kinds of skipped or rejected input"""
    load = "LoadError"
    validation = "ValidationError"
    split_anomaly = "SplitAnomaly"


class IngestError(Exception):
    """Base for per-input failures; never aborts a pipeline run."""
    kind: ErrorKind

    def __init__(self, path: str, message: str, ordinal: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.ordinal = ordinal
        self.message = message

    def __str__(self) -> str:
        where = self.path if self.ordinal is None else f"{self.path}#{self.ordinal}"
        return f"{where}: {self.message}"


class LoadError(IngestError):
    """A source file could not be read (I/O, permissions, encoding, timeout)."""
    kind = ErrorKind.load


class ValidationError(IngestError):
    """A logical document was rejected: bad or missing frontmatter."""
    kind = ErrorKind.validation


class ErrorReport(BaseModel):
    """One entry of the error list: { path, ordinal?, kind, message }."""
    model_config = ConfigDict(frozen=True)

    path: str
    ordinal: Optional[int] = None
    kind: ErrorKind
    message: str

    @classmethod
    def from_exc(cls, exc: IngestError) -> "ErrorReport":
        return cls(path=exc.path, ordinal=exc.ordinal, kind=exc.kind, message=exc.message)

    def sort_key(self) -> tuple:
        return (self.path, -1 if self.ordinal is None else self.ordinal, self.kind.value, self.message)

"""Exceptions raised while reading and normalizing cluster objects."""

from typing import Optional


class StartpageError(Exception):
    """Base class for all errors raised by this package."""


class SourceQueryError(StartpageError):
    """A list call for one object kind failed as a whole.

    Raised by the client layer; the aggregation pipeline catches it and
    treats the kind as contributing nothing for this cycle.
    """

    def __init__(self, resource: str, cause: Exception, status: Optional[int] = None):
        self.resource = resource
        self.cause = cause
        self.status = status
        super().__init__(f"Error listing {resource}: {cause}")

    @property
    def not_installed(self) -> bool:
        return self.status == 404


class MalformedObjectError(StartpageError, ValueError):
    """A single object lacks a field its source treats as required."""

    def __init__(self, message: str, namespace: Optional[str] = None, name: Optional[str] = None):
        self.namespace = namespace
        self.name = name
        super().__init__(message)

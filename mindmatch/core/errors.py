"""
Error taxonomy and the Result container.

Services raise these exceptions; the HTTP layer maps `status_code` to a
response. ProfileStore and AuthGateway catch them and hand them back inside
a `Result` so callers check `result.error` before trusting `result.data`.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class MindMatchError(Exception):
    """Base class for every error this package raises on purpose."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class NotFoundError(MindMatchError):
    status_code = 404


class AlreadyExistsError(MindMatchError):
    status_code = 409


class AlreadyRegisteredError(AlreadyExistsError):
    pass


class UnauthorizedError(MindMatchError):
    status_code = 401


class ForbiddenError(UnauthorizedError):
    status_code = 403


class TransportError(MindMatchError):
    status_code = 502


class MalformedResponseError(MindMatchError):
    status_code = 502


class ValidationError(MindMatchError):
    status_code = 422


class InvalidTransitionError(MindMatchError):
    status_code = 409


class ImmutableRecordError(MindMatchError):
    status_code = 409


@dataclass
class Result(Generic[T]):
    data: Optional[T] = None
    error: Optional[MindMatchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "Result[T]":
        return cls(data=data, error=None)

    @classmethod
    def failure(cls, error: MindMatchError) -> "Result[T]":
        return cls(data=None, error=error)

    def unwrap(self) -> T:
        """Return data or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.data

"""Error types raised by the APIstax client.

Every public operation either returns a fully populated result or raises
exactly one APIstaxError subclass:

- ResponseError: the service answered with a non-2xx status.
- TransportError: the request never completed (connect, timeout, stream I/O).
- DecodeError: a 2xx body could not be parsed into the declared result type.
"""

from __future__ import annotations

from typing import Sequence

FORBIDDEN_MESSAGE = "message.forbidden"
UNKNOWN_ERROR_MESSAGE = "message.unknownError"


class APIstaxError(Exception):
    """Base class for client errors.

    Carries zero or more message codes and an optional underlying cause.
    At least one of the two must be present.
    """

    def __init__(
        self,
        messages: Sequence[str] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.messages: list[str] = list(messages or [])
        if not self.messages and cause is None:
            raise ValueError(f"{type(self).__name__} requires messages or a cause")
        super().__init__(",".join(self.messages) if self.messages else str(cause))
        self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class ResponseError(APIstaxError):
    """Raised when the service returns a non-2xx status."""

    def __init__(
        self,
        messages: Sequence[str],
        status_code: int,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(messages, cause)
        self.status_code = status_code


class TransportError(APIstaxError):
    """Raised when a request fails below HTTP (connection error, timeout, etc.)."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(None, cause)


class DecodeError(APIstaxError):
    """Raised when a response body cannot be parsed into the declared type."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(None, cause)

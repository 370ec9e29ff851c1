"""Response Mapper - Turns a RawResponse into a result or a ResponseError.

The decoder is chosen by the caller (what it declared via Accept), never by
sniffing the response Content-Type.

Error bodies are expected as {"messages": [...]}. When the body does not
have that shape the status decides the fallback message:

    401    -> ["message.forbidden"]
    other  -> ["message.unknownError"]

with the parse failure kept as the error's cause.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from apistax_client.errors import (
    FORBIDDEN_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    DecodeError,
    ResponseError,
)
from apistax_client.models import ErrorMessage
from apistax_client.serialization import decode
from apistax_client.transport import RawResponse

T = TypeVar("T")


class BinaryDecoder:
    """Returns the body bytes unmodified."""

    def __call__(self, data: bytes) -> bytes:
        return data


class JsonDecoder(Generic[T]):
    """Parses the body as JSON into result_type."""

    def __init__(self, result_type: type[T]) -> None:
        self.result_type = result_type

    def __call__(self, data: bytes) -> T:
        return decode(data, self.result_type)


BINARY = BinaryDecoder()


def map_response(raw: RawResponse, decoder: Callable[[bytes], T]) -> T:
    """Decode a successful response or raise the matching error.

    The response is always closed before returning or raising.

    Raises:
        ResponseError: Status outside 200-299.
        DecodeError: Success body does not fit the decoder's type.
        TransportError: The body stream broke while reading.
    """
    try:
        if not raw.is_success:
            raise _error_from(raw)
        return decoder(raw.read())
    finally:
        raw.close()


def _error_from(raw: RawResponse) -> ResponseError:
    body = raw.read()
    try:
        error = decode(body, ErrorMessage)
    except DecodeError as e:
        fallback = FORBIDDEN_MESSAGE if raw.status_code == 401 else UNKNOWN_ERROR_MESSAGE
        return ResponseError([fallback], raw.status_code, cause=e)
    return ResponseError(error.messages, raw.status_code)

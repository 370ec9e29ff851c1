"""Transport - Sends built requests through an httpx.Client.

Responses are opened in streaming mode so large binary bodies (PDFs, images)
are read once, by the response mapper. Faults are surfaced immediately as
TransportError; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from apistax_client.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class RawResponse:
    """Status and unread body of one HTTP response.

    Must be consumed exactly once (read) and released (close).
    """

    status_code: int
    content_type: str
    _response: httpx.Response

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

    def read(self) -> bytes:
        """Read the whole body.

        Raises:
            TransportError: If the stream breaks while reading.
        """
        try:
            return self._response.read()
        except (httpx.RequestError, httpx.StreamError) as e:
            logger.debug("Reading response body failed: %s", e)
            raise TransportError(e) from e

    def close(self) -> None:
        self._response.close()


class Transport:
    """Sends requests via an injected httpx.Client.

    The client may be shared between threads; Transport keeps no per-call
    state of its own.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def send(self, request: httpx.Request) -> RawResponse:
        """Send request and return the response with its body still unread.

        Raises:
            TransportError: On connection errors, timeouts, or other
                request-level failures.
        """
        logger.debug("%s %s", request.method, request.url.path)
        try:
            response = self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            logger.debug("Request timeout: %s %s", request.method, request.url.path)
            raise TransportError(e) from e
        except httpx.ConnectError as e:
            logger.debug("Connection error: %s %s", request.method, request.url.path)
            raise TransportError(e) from e
        except (httpx.RequestError, httpx.StreamError) as e:
            logger.debug("Request error: %s %s: %s", request.method, request.url.path, e)
            raise TransportError(e) from e

        logger.debug("%s %s -> %d", request.method, request.url.path, response.status_code)
        return RawResponse(
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            _response=response,
        )

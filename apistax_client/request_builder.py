"""Request Builder - Turns (path, body, accept, query) into an httpx.Request.

Method selection: POST when a body is present, GET otherwise. Content-Type
is only set together with a body. The Accept header is the caller-declared
response media type and is what later selects binary vs JSON decoding.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import IO, Any, Mapping

import httpx

from apistax_client.serialization import encode

DISTRIBUTION_NAME = "apistax-client"

# Version of the installed client library (sent in User-Agent)
try:
    CLIENT_VERSION = version(DISTRIBUTION_NAME)
except PackageNotFoundError:
    # Running from a source tree that was never installed
    CLIENT_VERSION = "0+unknown"
USER_AGENT = f"apistax-python-client {CLIENT_VERSION}"


class JsonBody:
    """Request body serialized as a JSON document."""

    content_type = "application/json"

    def __init__(self, payload: Any) -> None:
        self.payload = payload

    def request_kwargs(self) -> dict[str, Any]:
        return {
            "content": encode(self.payload),
            "headers": {"Content-Type": self.content_type},
        }


class FileBody:
    """Request body carrying one uploaded file as multipart/form-data.

    httpx generates the Content-Type header (with boundary) from ``files``.
    """

    content_type = "multipart/form-data"
    field_name = "file"
    file_name = "document.pdf"
    part_media_type = "application/octet-stream"

    def __init__(self, file: bytes | IO[bytes]) -> None:
        self.file = file

    def request_kwargs(self) -> dict[str, Any]:
        return {
            "files": {self.field_name: (self.file_name, self.file, self.part_media_type)},
        }


Body = JsonBody | FileBody


class RequestBuilder:
    """Builds authenticated requests against one base URL.

    Holds only immutable data (base URL and credential), so a single builder
    can serve concurrent calls.
    """

    def __init__(self, base_url: str, api_key: str) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key

    @property
    def base_url(self) -> str:
        return self._base_url

    def build(
        self,
        path: str,
        body: Body | None = None,
        accept: str | None = None,
        query: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        """Build a request for path.

        Args:
            path: Path below the base URL, e.g. "/v1/html-to-pdf".
            body: Optional body provider. Presence switches the method to POST.
            accept: Media type for the Accept header.
            query: Query parameters, appended in the given order.

        Returns:
            A ready-to-send httpx.Request.
        """
        headers: dict[str, str] = {
            "Authorization": f"Bearer {self._api_key}",
            "User-Agent": USER_AGENT,
        }
        if accept is not None:
            headers["Accept"] = accept

        # httpx encodes a list of pairs in order
        params: list[tuple[str, str]] | None = None
        if query:
            params = [(key, value) for key, value in query.items()]

        url = self._base_url + path

        if body is None:
            return httpx.Request("GET", url, params=params, headers=headers)

        kwargs = body.request_kwargs()
        headers.update(kwargs.pop("headers", {}))
        return httpx.Request("POST", url, params=params, headers=headers, **kwargs)

"""Pytest configuration and fixtures for apistax-client tests.

This file provides:
- make_client: APIstaxClient wired to an in-process httpx.MockTransport
- RecordingStream: response body stream that records close() calls
- MockApistaxServer: the mock service in a child process, for integration tests
"""

from __future__ import annotations

import socket
import subprocess
import sys
import time
from pathlib import Path
from typing import Any, Callable, Generator, Iterator

import httpx
import pytest

from apistax_client.client import APIstaxClient

# Project root for subprocess cwd
PROJECT_ROOT = Path(__file__).parent.parent
MOCK_SERVER_MODULE = "tests.integration.mock_server"

TEST_API_KEY = "API_KEY"
TEST_BASE_URL = "http://apistax.test"

Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler, api_key: str = TEST_API_KEY) -> APIstaxClient:
    """Create a client whose requests are answered by handler.

    The httpx.Client is injected, so tests never touch the network.
    """
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return APIstaxClient(api_key, TEST_BASE_URL, http_client=http_client)


class RequestRecorder:
    """Handler that records requests and answers each with a fresh response.

    Usage:
        recorder = RequestRecorder(200, content=b"PDF")
        client = make_client(recorder)
        client.convert_html_to_pdf("<p>x</p>")
        assert recorder.last.method == "POST"
    """

    def __init__(self, status_code: int = 200, **response_kwargs: Any) -> None:
        self._status_code = status_code
        self._response_kwargs = response_kwargs
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self._status_code, **self._response_kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class RecordingStream(httpx.SyncByteStream):
    """Response stream that yields chunks (or raises) and records close().

    Args:
        chunks: Byte chunks to yield.
        error: Exception raised after the chunks are exhausted, if any.
    """

    def __init__(self, chunks: list[bytes], error: BaseException | None = None) -> None:
        self._chunks = chunks
        self._error = error
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks
        if self._error is not None:
            raise self._error

    def close(self) -> None:
        self.closed = True
def unused_local_port() -> int:
    """Port on 127.0.0.1 with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class MockApistaxServer:
    """The FastAPI app in tests/integration/mock_server.py, served by uvicorn
    in a child process on a free local port."""

    startup_timeout = 10.0

    def __init__(self) -> None:
        self.port = unused_local_port()
        self.base_url = f"http://127.0.0.1:{self.port}"
        self._process: subprocess.Popen | None = None

    def start(self) -> None:
        self._process = subprocess.Popen(
            [sys.executable, "-m", MOCK_SERVER_MODULE, "--port", str(self.port)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            cwd=PROJECT_ROOT,
        )
        if not self._answers_http():
            self.stop()
            raise RuntimeError(f"mock APIstax server did not come up at {self.base_url}")

    def _answers_http(self) -> bool:
        # Any HTTP answer (the auth middleware replies 401) means uvicorn is serving
        deadline = time.monotonic() + self.startup_timeout
        while time.monotonic() < deadline:
            if self._process is not None and self._process.poll() is not None:
                return False
            try:
                httpx.get(f"{self.base_url}/v1/broken", timeout=1.0)
                return True
            except httpx.TransportError:
                time.sleep(0.1)
        return False

    def stop(self) -> None:
        if self._process is None:
            return
        self._process.terminate()
        try:
            self._process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            self._process.kill()
            self._process.wait()
        self._process = None

    def __enter__(self) -> MockApistaxServer:
        self.start()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.stop()



# =============================================================================
# Pytest Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def mock_server() -> Generator[MockApistaxServer, None, None]:
    """Mock APIstax service, started once per test session."""
    with MockApistaxServer() as server:
        yield server


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark tests under tests/integration as integration, others as unit."""
    for item in items:
        test_path = Path(item.fspath)
        if "integration" in test_path.parts:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)

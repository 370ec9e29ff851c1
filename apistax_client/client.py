"""APIstax client - typed access to the APIstax document and lookup API.

Every operation funnels through APIstaxClient.request:

    RequestBuilder.build -> Transport.send -> map_response

Usage:
    with APIstaxClient(api_key) as client:
        pdf = client.convert_html_to_pdf("<h1>Hello</h1>")
        result = client.verify_vat_id("ATU12345678")
"""

from __future__ import annotations

import warnings
from enum import Enum
from typing import IO, Any, Callable, Mapping, TypeVar
from urllib.parse import quote

import httpx

from apistax_client.config import ClientConfig
from apistax_client.models import (
    BarcodePayload,
    EpcQrCodePayload,
    GeocodeResult,
    GeocodeReversePayload,
    GeocodeSearchPayload,
    HctQrCodePayload,
    HtmlPayload,
    Index,
    IndexFrequency,
    IndexResult,
    InvoicePayload,
    InvoicePayloadV1,
    PayBySquareQrCodePayload,
    SpaydQrCodePayload,
    SwissQrInvoiceFormat,
    SwissQrInvoicePayload,
    VatVerificationPayload,
    VatVerificationResult,
)
from apistax_client.request_builder import Body, FileBody, JsonBody, RequestBuilder
from apistax_client.response_mapper import BINARY, JsonDecoder, map_response
from apistax_client.transport import Transport

T = TypeVar("T")

DEFAULT_BASE_URL = "https://api.apistax.io"
DEFAULT_TIMEOUT = 30.0

JSON = "application/json"
PDF = "application/pdf"
PNG = "image/png"
SVG = "image/svg+xml"
ANY_IMAGE = "image/*"

_SWISS_QR_INVOICE_MEDIA_TYPES: dict[SwissQrInvoiceFormat, str] = {
    SwissQrInvoiceFormat.PDF: PDF,
    SwissQrInvoiceFormat.PNG: PNG,
    SwissQrInvoiceFormat.SVG: SVG,
}


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


class APIstaxClient:
    """Synchronous client for the APIstax API.

    Holds only the credential, the base URL and an httpx.Client, none of
    which change after construction, so one instance can be used from
    several threads at once.

    Args:
        api_key: Bearer token sent with every request.
        base_url: Service address. Defaults to the production endpoint.
        http_client: Optional httpx.Client to send requests with. An injected
            client is not closed by close(); the caller owns it.
        timeout: Timeout in seconds for a client created here.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not api_key:
            raise ValueError("api_key must not be empty")

        self._builder = RequestBuilder(base_url, api_key)
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout)
        self._transport = Transport(self._http_client)

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "APIstaxClient":
        """Create a client from a loaded ClientConfig."""
        return cls(config.api_key, config.base_url, timeout=config.timeout, **kwargs)

    def __enter__(self) -> "APIstaxClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            self._http_client.close()

    @property
    def base_url(self) -> str:
        return self._builder.base_url

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def request(
        self,
        path: str,
        body: Body | None,
        accept: str | None,
        query: Mapping[str, str] | None,
        decoder: Callable[[bytes], T],
    ) -> T:
        """Send one request and decode its response with decoder.

        Raises:
            ResponseError: The service returned a non-2xx status.
            TransportError: The request could not be completed.
            DecodeError: The response body did not fit the declared type.
        """
        http_request = self._builder.build(path, body, accept, query)
        raw = self._transport.send(http_request)
        return map_response(raw, decoder)

    def request_binary(self, path: str, body: Body | None, accept: str) -> bytes:
        """Request a binary document and return its bytes."""
        return self.request(path, body, accept, None, BINARY)

    def request_json(
        self,
        path: str,
        result_type: type[T],
        body: Body | None = None,
        query: Mapping[str, str] | None = None,
    ) -> T:
        """Request a JSON document and parse it into result_type."""
        return self.request(path, body, JSON, query, JsonDecoder(result_type))

    # -------------------------------------------------------------------------
    # Document generation
    # -------------------------------------------------------------------------

    def convert_html_to_pdf(self, payload: HtmlPayload | str) -> bytes:
        """Convert HTML to PDF. A plain string is used as the HTML content."""
        if isinstance(payload, str):
            payload = HtmlPayload(content=payload)
        return self.request_binary("/v1/html-to-pdf", JsonBody(payload), PDF)

    def convert_pdf_to_pdf_a(self, file: bytes | IO[bytes]) -> bytes:
        """Convert a PDF document (bytes or binary file object) to PDF/A."""
        return self.request_binary("/v1/pdf-to-pdf-a", FileBody(file), PDF)

    def generate_invoice_pdf(self, payload: InvoicePayload) -> bytes:
        return self.request_binary("/v2/invoice-pdf", JsonBody(payload), PDF)

    def generate_invoice_pdf_v1(self, payload: InvoicePayloadV1) -> bytes:
        """Create an invoice PDF with the v1 endpoint.

        Deprecated: use generate_invoice_pdf.
        """
        warnings.warn(
            "generate_invoice_pdf_v1 is deprecated, use generate_invoice_pdf",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.request_binary("/v1/invoice-pdf", JsonBody(payload), PDF)

    def generate_swiss_qr_invoice(
        self,
        payload: SwissQrInvoicePayload,
        format: SwissQrInvoiceFormat | None = None,
    ) -> bytes:
        """Generate a Swiss QR invoice as PDF (default), PNG or SVG."""
        accept = _SWISS_QR_INVOICE_MEDIA_TYPES.get(format, PDF)
        return self.request_binary("/v1/swiss-qr-invoice", JsonBody(payload), accept)

    def generate_barcode(self, payload: BarcodePayload) -> bytes:
        return self.request_binary("/v1/barcode", JsonBody(payload), ANY_IMAGE)

    # -------------------------------------------------------------------------
    # Payment QR codes
    # -------------------------------------------------------------------------

    def generate_epc_qr_code(
        self,
        payload: EpcQrCodePayload | str,
        recipient: str | None = None,
    ) -> bytes:
        """Generate an EPC QR code PNG.

        Either pass a full payload, or an IBAN and recipient name:
            client.generate_epc_qr_code("AT611904300234573201", "Jane Doe")
        """
        if isinstance(payload, str):
            if recipient is None:
                raise TypeError("generate_epc_qr_code(iban, recipient) requires a recipient")
            payload = EpcQrCodePayload(iban=payload, recipient=recipient)
        return self.request_binary("/v1/epc-qr-code", JsonBody(payload), PNG)

    def generate_spayd_qr_code(self, payload: SpaydQrCodePayload) -> bytes:
        return self.request_binary("/v1/spayd-qr-code", JsonBody(payload), PNG)

    def generate_hct_qr_code(self, payload: HctQrCodePayload) -> bytes:
        return self.request_binary("/v1/hct-qr-code", JsonBody(payload), PNG)

    def generate_pay_by_square_qr_code(self, payload: PayBySquareQrCodePayload) -> bytes:
        return self.request_binary("/v1/pay-by-square-qr-code", JsonBody(payload), PNG)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def verify_vat_id(self, payload: VatVerificationPayload | str) -> VatVerificationResult:
        """Check whether a company's VAT ID is valid."""
        if isinstance(payload, str):
            payload = VatVerificationPayload(vat_id=payload)
        return self.request_json(
            "/v1/vat-verification", VatVerificationResult, body=JsonBody(payload)
        )

    def geocode_search(self, payload: GeocodeSearchPayload | str) -> GeocodeResult:
        """Convert a free-text address to coordinates."""
        if isinstance(payload, str):
            payload = GeocodeSearchPayload(query=payload)
        return self.request_json("/v1/geocode/search", GeocodeResult, body=JsonBody(payload))

    def geocode_reverse(
        self,
        payload: GeocodeReversePayload | float,
        longitude: float | None = None,
    ) -> GeocodeResult:
        """Convert coordinates to a postal address.

        Either pass a payload, or latitude and longitude:
            client.geocode_reverse(48.20661, 16.36301)
        """
        if not isinstance(payload, GeocodeReversePayload):
            if longitude is None:
                raise TypeError("geocode_reverse(latitude, longitude) requires a longitude")
            payload = GeocodeReversePayload(latitude=payload, longitude=longitude)
        return self.request_json("/v1/geocode/reverse", GeocodeResult, body=JsonBody(payload))

    def fetch_index(
        self,
        index: Index | str,
        frequency: IndexFrequency | str | None = None,
    ) -> IndexResult:
        """Fetch the published values of an index, e.g. a consumer price index."""
        query = {"frequency": _enum_value(frequency)} if frequency is not None else None
        path = "/v1/indexes/" + quote(_enum_value(index), safe="")
        return self.request_json(path, IndexResult, query=query)

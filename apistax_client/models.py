"""Payload and result records exchanged with the APIstax service.

All models use Pydantic v2. Python attributes are snake_case; the wire names
are camelCase (alias generator). Unknown fields in responses are ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Annotated, Union

from pydantic import BaseModel, ConfigDict, Field, PlainValidator, field_validator
from pydantic.alias_generators import to_camel


def _lenient_enum(enum_type: type[Enum]) -> Any:
    """Annotated type that reads unknown enum labels as plain strings.

    A new value added on the service side must not abort decoding of the
    surrounding record.
    """

    def validate(value: Any) -> Any:
        if isinstance(value, enum_type):
            return value
        if not isinstance(value, str):
            raise ValueError(
                f"{enum_type.__name__} label must be a string, got {type(value).__name__}"
            )
        try:
            return enum_type(value)
        except ValueError:
            return value

    return Annotated[Union[enum_type, str], PlainValidator(validate)]


# =============================================================================
# Enums
# =============================================================================


class IndexFrequency(str, Enum):
    """How often an economic index is published."""

    YEARLY = "YEARLY"
    MONTHLY = "MONTHLY"


class Index(str, Enum):
    """Known index identifiers. Any other id string is accepted as well."""

    AT_CPI_1 = "at-cpi-1"


class SwissQrInvoiceFormat(str, Enum):
    """Output format of a Swiss QR invoice."""

    PDF = "PDF"
    PNG = "PNG"
    SVG = "SVG"


LenientIndexFrequency = _lenient_enum(IndexFrequency)


# =============================================================================
# Base Models
# =============================================================================


class ApiModel(BaseModel):
    """Base for every record on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class OpenPayload(ApiModel):
    """Payload whose fields are passed through as given.

    Extra keyword fields are written verbatim, so use the wire (camelCase)
    names, e.g. ``BarcodePayload(content="123", type="CODE_128")``.
    """

    model_config = ConfigDict(extra="allow")


class ErrorMessage(ApiModel):
    """Error body returned by the service on non-2xx responses."""

    messages: list[str] = Field(min_length=1, description="Message codes, in order")


# =============================================================================
# Document Generation Payloads
# =============================================================================


class HtmlPayload(ApiModel):
    """HTML document plus page formatting for PDF conversion."""

    content: str = Field(description="The HTML document to convert")
    header: str | None = Field(default=None, description="HTML rendered on top of each page")
    footer: str | None = Field(default=None, description="HTML rendered at the bottom of each page")
    width: float | None = Field(default=None, description="Page width")
    height: float | None = Field(default=None, description="Page height")
    margin_top: float | None = None
    margin_bottom: float | None = None
    margin_start: float | None = None
    margin_end: float | None = None
    landscape: bool | None = None
    print_background: bool | None = None


class EpcQrCodePayload(ApiModel):
    """SEPA credit transfer (EPC) QR code contents."""

    bic: str | None = None
    iban: str = Field(description="International bank account number of the recipient")
    recipient: str = Field(description="Name of the recipient")
    currency: str | None = None
    amount: float | None = None
    reference: str | None = None
    text: str | None = None
    size: int | None = Field(default=None, description="Image edge length in pixels")
    frame: bool | None = None
    message: str | None = None


class SwissQrInvoicePayload(OpenPayload):
    """Swiss QR bill contents."""


class InvoicePayload(OpenPayload):
    """Invoice document contents."""


class InvoicePayloadV1(OpenPayload):
    """Invoice document contents for the deprecated v1 endpoint."""


class BarcodePayload(OpenPayload):
    """Barcode contents and rendering options."""


class SpaydQrCodePayload(OpenPayload):
    """Czech Short Payment Descriptor QR code contents."""


class HctQrCodePayload(OpenPayload):
    """Croatian HUB3 payment QR code contents."""


class PayBySquareQrCodePayload(OpenPayload):
    """Slovak PAY by square QR code contents."""


# =============================================================================
# Lookup Payloads and Results
# =============================================================================


class VatVerificationPayload(ApiModel):
    vat_id: str = Field(description="The VAT ID to check")


class VatVerificationResult(ApiModel):
    valid: bool | None = None
    name: str | None = None
    address: str | None = None
    country_code: str | None = None


class GeocodeSearchPayload(ApiModel):
    query: str = Field(description="Free-text address, e.g. 'Heldenplatz, Wien'")
    language: str | None = None


class GeocodeReversePayload(ApiModel):
    latitude: float
    longitude: float
    language: str | None = None


class Position(ApiModel):
    latitude: float | None = None
    longitude: float | None = None


class Address(ApiModel):
    house_number: str | None = None
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    country_code: str | None = None


class GeocodeResult(ApiModel):
    """A geographic position together with its postal address."""

    position: Position | None = None
    address: Address | None = None


class IndexValue(ApiModel):
    year: int | None = None
    month: int | None = None
    value: float | None = None


class IndexResult(ApiModel):
    """Published values of an economic index such as a consumer price index."""

    id: str | None = None
    name: str | None = None
    source: str | None = None
    frequency: LenientIndexFrequency | None = None
    values: list[IndexValue] = Field(default_factory=list)

    @field_validator("values", mode="before")
    @classmethod
    def null_values_as_empty(cls, v: Any) -> Any:
        # The service may send "values": null for an index without data
        return [] if v is None else v

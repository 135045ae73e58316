"""Outcome models for the bid and bundle operations.

Every outcome is an externally tagged variant keyed by a lowerCamelCase tag:

- unit variants are a bare string: ``"decline"``
- newtype variants wrap their single value: ``{"tipTooLow": "42"}``
- struct variants wrap their fields: ``{"accept": {"tip": "-5", "block": "100"}}``

Successful HTTP answers wrap an outcome in ``{"response": <outcome>}``.
"""

from typing import Annotated, Any, ClassVar, Generic, TypeVar

from pydantic import (
    BaseModel,
    Discriminator,
    SerializerFunctionWrapHandler,
    Tag,
    TypeAdapter,
    model_serializer,
    model_validator,
)

from searcher.models.types import AuthToken, Int256, Uint256


class TaggedVariant(BaseModel):
    """Base class for a single outcome variant.

    Subclasses set ``tag``. Variants with exactly one value set
    ``newtype_field`` so the value is emitted without a field name.
    """

    tag: ClassVar[str]
    newtype_field: ClassVar[str | None] = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _unwrap_tag(cls, data: Any) -> Any:
        if isinstance(data, str) and data == cls.tag:
            return {}
        if isinstance(data, dict) and len(data) == 1 and cls.tag in data:
            payload = data[cls.tag]
            if cls.newtype_field is not None:
                return {cls.newtype_field: payload}
            return payload
        return data

    @model_serializer(mode="wrap")
    def _wrap_tag(self, handler: SerializerFunctionWrapHandler) -> Any:
        payload = handler(self)
        if not type(self).model_fields:
            return self.tag
        if self.newtype_field is not None:
            return {self.tag: payload[self.newtype_field]}
        return {self.tag: payload}


def _variant_tag(value: Any) -> str | None:
    """Discriminator for outcome unions, on wire data or model instances."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return next(iter(value)) if len(value) == 1 else None
    return getattr(value, "tag", None)


# =============================================================================
# Bid outcomes
# =============================================================================


class Accept(TaggedVariant):
    """Bid accepted at ``tip`` for ``block``. No auth token issued."""

    tag: ClassVar[str] = "accept"

    tip: Int256
    block: Uint256

    def __str__(self) -> str:
        return f"Accept {self.tip} @ height {self.block}"


class AcceptWithAuth(TaggedVariant):
    """Bid accepted and an auth token issued for the later bundle call."""

    tag: ClassVar[str] = "acceptWithAuth"

    tip: Int256
    token: AuthToken
    block: Uint256

    def __str__(self) -> str:
        return f"Accept {self.tip} @ height {self.block} with {self.token}"


class Decline(TaggedVariant):
    """Bid rejected."""

    tag: ClassVar[str] = "decline"

    def __str__(self) -> str:
        return "Decline"


class Incomplete(TaggedVariant):
    """Bid could not be evaluated."""

    tag: ClassVar[str] = "incomplete"
    newtype_field: ClassVar[str | None] = "reason"

    reason: str

    def __str__(self) -> str:
        return f"Incomplete: {self.reason}"


BidResponse = Annotated[
    Annotated[Accept, Tag(Accept.tag)]
    | Annotated[AcceptWithAuth, Tag(AcceptWithAuth.tag)]
    | Annotated[Decline, Tag(Decline.tag)]
    | Annotated[Incomplete, Tag(Incomplete.tag)],
    Discriminator(_variant_tag),
]


# =============================================================================
# Bundle outcomes
# =============================================================================


class Bundled(TaggedVariant):
    """Added to the searcher bundle. The searcher commits to inclusion."""

    tag: ClassVar[str] = "bundled"

    def __str__(self) -> str:
        return "Bundled"


class TipTooLow(TaggedVariant):
    """Signed tip is lower than the bid. Carries the minimum acceptable tip."""

    tag: ClassVar[str] = "tipTooLow"
    newtype_field: ClassVar[str | None] = "required"

    required: Int256

    def __str__(self) -> str:
        return f"TipTooLow {self.required}"


class NewBid(TaggedVariant):
    """The backend wants to adjust the bid instead of bundling as-is."""

    tag: ClassVar[str] = "newBid"
    newtype_field: ClassVar[str | None] = "bid"

    bid: BidResponse

    def __str__(self) -> str:
        return f"New Quote {self.bid}"


class UnknownToken(TaggedVariant):
    """The presented auth token was not recognized."""

    tag: ClassVar[str] = "unknownToken"

    def __str__(self) -> str:
        return "UnknownToken"


class Rejection(TaggedVariant):
    """Any other rejection, with a free-text reason."""

    tag: ClassVar[str] = "rejection"
    newtype_field: ClassVar[str | None] = "reason"

    reason: str

    def __str__(self) -> str:
        return f"Rejection: {self.reason}"


BundleResponse = Annotated[
    Annotated[Bundled, Tag(Bundled.tag)]
    | Annotated[TipTooLow, Tag(TipTooLow.tag)]
    | Annotated[NewBid, Tag(NewBid.tag)]
    | Annotated[UnknownToken, Tag(UnknownToken.tag)]
    | Annotated[Rejection, Tag(Rejection.tag)],
    Discriminator(_variant_tag),
]


# =============================================================================
# Envelope and codecs
# =============================================================================

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Single-field envelope for successful answers."""

    response: T


_bid_adapter: TypeAdapter[Any] = TypeAdapter(BidResponse)
_bundle_adapter: TypeAdapter[Any] = TypeAdapter(BundleResponse)


def encode_bid_response(outcome: BidResponse) -> Any:
    """Encode a bid outcome to its JSON-compatible wire form."""
    return _bid_adapter.dump_python(outcome, mode="json")


def decode_bid_response(data: Any) -> BidResponse:
    """Decode a bid outcome from its wire form.

    Raises:
        pydantic.ValidationError: If data is not exactly one bid variant
    """
    return _bid_adapter.validate_python(data)


def encode_bundle_response(outcome: BundleResponse) -> Any:
    """Encode a bundle outcome to its JSON-compatible wire form."""
    return _bundle_adapter.dump_python(outcome, mode="json")


def decode_bundle_response(data: Any) -> BundleResponse:
    """Decode a bundle outcome from its wire form.

    Raises:
        pydantic.ValidationError: If data is not exactly one bundle variant
    """
    return _bundle_adapter.validate_python(data)

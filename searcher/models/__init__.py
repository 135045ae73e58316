"""Pydantic models for searcher requests and outcomes."""

from searcher.models.requests import BidRequest, SignedBundleRequest
from searcher.models.responses import (
    Accept,
    AcceptWithAuth,
    ApiResponse,
    BidResponse,
    BundleResponse,
    Bundled,
    Decline,
    Incomplete,
    NewBid,
    Rejection,
    TipTooLow,
    UnknownToken,
    decode_bid_response,
    decode_bundle_response,
    encode_bid_response,
    encode_bundle_response,
)
from searcher.models.types import H256, Address, AuthToken, Bytes, Int256, Uint256

__all__ = [
    # Types
    "Address",
    "AuthToken",
    "Bytes",
    "H256",
    "Int256",
    "Uint256",
    # Requests
    "BidRequest",
    "SignedBundleRequest",
    # Bid outcomes
    "BidResponse",
    "Accept",
    "AcceptWithAuth",
    "Decline",
    "Incomplete",
    # Bundle outcomes
    "BundleResponse",
    "Bundled",
    "TipTooLow",
    "NewBid",
    "UnknownToken",
    "Rejection",
    # Envelope and codecs
    "ApiResponse",
    "encode_bid_response",
    "decode_bid_response",
    "encode_bundle_response",
    "decode_bundle_response",
]

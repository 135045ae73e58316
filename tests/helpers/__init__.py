"""Test helpers module for shared test utilities.

- constants: Addresses, tokens and 256-bit bounds
- factories: Request payload factory functions
"""

from tests.helpers.constants import (
    INT256_MAX,
    INT256_MIN,
    OTHER_TOKEN,
    RAW_TX,
    SEARCHER,
    TARGET,
    TOKEN,
    UINT256_MAX,
)
from tests.helpers.factories import (
    make_bid_payload,
    make_bid_request,
    make_bundle_payload,
    make_bundle_request,
)

__all__ = [
    # Constants
    "SEARCHER",
    "TARGET",
    "TOKEN",
    "OTHER_TOKEN",
    "RAW_TX",
    "UINT256_MAX",
    "INT256_MIN",
    "INT256_MAX",
    # Factories
    "make_bid_payload",
    "make_bid_request",
    "make_bundle_payload",
    "make_bundle_request",
]

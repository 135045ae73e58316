"""The backend contract the HTTP layer dispatches to."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from searcher.models.requests import BidRequest, SignedBundleRequest
from searcher.models.responses import BidResponse, BundleResponse
from searcher.models.types import AuthToken


@runtime_checkable
class SearcherService(Protocol):
    """Protocol for bidding backends.

    All bidding and acceptance decisions live behind this seam. Negative
    decisions are returned as outcome variants; raising signals a backend
    failure and is answered with a generic 500.

    One instance is shared by every in-flight request, so implementations
    must tolerate concurrent calls and synchronize their own state.
    """

    async def bid(self, request: BidRequest) -> BidResponse:
        """Evaluate a bid for transaction inclusion.

        Args:
            request: The decoded bid

        Returns:
            One of Accept, AcceptWithAuth, Decline or Incomplete
        """
        ...

    async def bundle(
        self,
        request: SignedBundleRequest,
        auth: AuthToken | None,
    ) -> BundleResponse:
        """Accept a signed transaction into the bundle.

        Args:
            request: The decoded signed transaction
            auth: Auth token from the URL path, or None when absent

        Returns:
            One of Bundled, TipTooLow, NewBid, UnknownToken or Rejection
        """
        ...

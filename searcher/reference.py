"""In-memory reference backend.

InMemorySearcher implements SearcherService with a flat minimum tip and a
locked book of issued auth tokens. It does not rank bids or build blocks;
it exists so the API can be run and exercised end to end.
"""

from __future__ import annotations

import asyncio
import os
import secrets
from dataclasses import dataclass

import structlog

from searcher.models.requests import BidRequest, SignedBundleRequest
from searcher.models.responses import (
    Accept,
    AcceptWithAuth,
    BidResponse,
    BundleResponse,
    Bundled,
    Decline,
    Incomplete,
    NewBid,
    Rejection,
    TipTooLow,
    UnknownToken,
)
from searcher.models.types import AuthToken

logger = structlog.get_logger()

# Cap on the token book when nothing advances the block height
DEFAULT_MAX_TOKENS = 10_000


@dataclass(frozen=True)
class IssuedBid:
    """An accepted bid waiting for its signed bundle."""

    tip: int
    block: int


class InMemorySearcher:
    """Reference SearcherService backed by an in-memory token book.

    Args:
        min_tip: Smallest tip accepted for a bid or an unauthenticated bundle
        issue_tokens: Whether accepted bids get an auth token
        current_block: Latest known block height
        max_tokens: Outstanding tokens kept before the oldest are evicted
    """

    def __init__(
        self,
        min_tip: int = 0,
        issue_tokens: bool = True,
        current_block: int = 0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        if max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {max_tokens}")
        self.min_tip = min_tip
        self.issue_tokens = issue_tokens
        self.max_tokens = max_tokens
        self._current_block = current_block
        self._issued: dict[str, IssuedBid] = {}
        self._lock = asyncio.Lock()

    @property
    def current_block(self) -> int:
        return self._current_block

    @property
    def next_block(self) -> int:
        return self._current_block + 1

    @property
    def outstanding_tokens(self) -> int:
        """Number of issued tokens not yet redeemed or expired."""
        return len(self._issued)

    async def set_block(self, height: int) -> None:
        """Advance the current block and drop tokens for blocks already passed."""
        async with self._lock:
            self._current_block = height
            expired = [token for token, bid in self._issued.items() if bid.block <= height]
            for token in expired:
                del self._issued[token]
        if expired:
            logger.debug("tokens_expired", block=height, count=len(expired))

    async def bid(self, request: BidRequest) -> BidResponse:
        if request.to is None:
            return Incomplete(reason="missing recipient")
        if request.tip < self.min_tip:
            return Decline()

        block = request.block if request.block is not None else self.next_block
        if not self.issue_tokens:
            return Accept(tip=request.tip, block=block)

        token = "0x" + secrets.token_hex(32)
        async with self._lock:
            # dicts keep insertion order, so the first keys are the oldest
            evicted = len(self._issued) + 1 - self.max_tokens
            for stale in list(self._issued)[: max(evicted, 0)]:
                del self._issued[stale]
            self._issued[token] = IssuedBid(tip=request.tip, block=block)
        if evicted > 0:
            logger.debug("tokens_evicted", count=evicted, max_tokens=self.max_tokens)
        return AcceptWithAuth(tip=request.tip, token=token, block=block)

    async def bundle(
        self,
        request: SignedBundleRequest,
        auth: AuthToken | None,
    ) -> BundleResponse:
        if auth is not None:
            async with self._lock:
                issued = self._issued.get(auth)
                if issued is None:
                    return UnknownToken()
                if request.tip < issued.tip:
                    return TipTooLow(required=issued.tip)
                # Tokens are single use
                del self._issued[auth]
            return Bundled()

        if request.is_empty:
            return Rejection(reason="empty transaction")
        if request.tip < self.min_tip:
            return NewBid(bid=Accept(tip=self.min_tip, block=self.next_block))
        return Bundled()


def get_default_service() -> InMemorySearcher:
    """Build the reference backend from SEARCHER_* environment variables."""
    min_tip = int(os.environ.get("SEARCHER_MIN_TIP", "0"))
    issue_tokens = os.environ.get("SEARCHER_ISSUE_TOKENS", "true").lower() in ("true", "1", "yes")
    max_tokens = int(os.environ.get("SEARCHER_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))
    return InMemorySearcher(min_tip=min_tip, issue_tokens=issue_tokens, max_tokens=max_tokens)

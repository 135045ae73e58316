"""Pydantic models for searcher requests.

The core only needs these to be decodable; their meaning belongs to the
backend, so unknown fields are kept rather than rejected.
"""

from pydantic import BaseModel, Field

from searcher.models.types import Address, Bytes, Int256, Uint256


class BidRequest(BaseModel):
    """An unsigned transaction a searcher wants included, with its offered tip."""

    from_: Address | None = Field(default=None, alias="from")
    to: Address | None = None
    value: Uint256 = 0
    data: Bytes = "0x"
    gas: Uint256 | None = None
    tip: Int256 = Field(description="Tip offered for inclusion.")
    block: Uint256 | None = Field(
        default=None,
        description="Target block height. Backend picks one if omitted.",
    )

    model_config = {"extra": "allow", "populate_by_name": True}


class SignedBundleRequest(BaseModel):
    """A signed transaction submitted for bundling after a bid."""

    raw_tx: Bytes = Field(alias="rawTx", description="RLP-encoded signed transaction.")
    tip: Int256 = Field(description="Tip paid by the signed transaction.")
    block: Uint256 | None = None

    model_config = {"extra": "allow", "populate_by_name": True}

    @property
    def is_empty(self) -> bool:
        """True when no transaction bytes were supplied."""
        return self.raw_tx == "0x"

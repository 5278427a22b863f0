from __future__ import annotations

from pydantic import BaseModel, Field


class FactoryConfig(BaseModel):
    """
    FactoryConfig（FINAL / FROZEN）

    Semantics:
      - defaults for a freshly deployed EscrowFactory
      - accounts are given as labels or 0x addresses
    """

    # protocol fee applied to every escrow created from now on
    fee_bps: int = Field(490, ge=0, le=10_000)

    # admin of the factory
    owner: str = "owner"

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class SimulationConfig(BaseModel):
    """
    One in-memory lifecycle run: signal → create → claim → exit.
    """

    # beneficiaries (labels or addresses)
    accounts: List[str] = Field(default_factory=lambda: ["alice"], min_length=1)

    # position each account stakes before moving it into its escrow
    stake: int = Field(1_000, gt=0)

    # native yield distributed to each escrow before its first claim
    reward: int = Field(1_000_000, ge=0)

    # finish with signal_transfer_out
    exit: bool = True

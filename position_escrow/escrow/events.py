from __future__ import annotations

from dataclasses import dataclass

from position_escrow.chain import Event


# -------------------------
# Escrow
# -------------------------
@dataclass(frozen=True)
class Deposit(Event):
    sender: str
    amount: int


@dataclass(frozen=True)
class Claimed(Event):
    beneficiary: str
    reward: int
    fee: int
    payout: int
    harvested: bool


@dataclass(frozen=True)
class TransferOutSignaled(Event):
    controller: str
    token_id: int


# -------------------------
# Factory
# -------------------------
@dataclass(frozen=True)
class EscrowDeployed(Event):
    account: str
    escrow: str
    token_id: int
    fee_bps: int


@dataclass(frozen=True)
class FeeBasisPointsUpdated(Event):
    previous: int
    current: int


@dataclass(frozen=True)
class RewardRouterUpdated(Event):
    previous: str
    current: str


@dataclass(frozen=True)
class EscrowControllerUpdated(Event):
    previous: str
    current: str


@dataclass(frozen=True)
class Withdrawn(Event):
    to: str
    amount: int
    token: str

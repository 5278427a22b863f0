#!filepath: position_escrow/escrow/state.py
from __future__ import annotations

from enum import Enum
from typing import Optional


class EscrowState(Enum):
    """
    Escrow lifecycle, derived from position-NFT ownership only.

    PENDING : token not minted yet (or unknown)  → factory controls
    STAGED  : token held by the escrow itself    → beneficiary controls
    ACTIVE  : token held by anyone else          → that holder controls
    CLOSED  : token burned                       → factory controls
    """

    PENDING = "PENDING"
    STAGED = "STAGED"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


def resolve_state(owner: Optional[str], burned: bool, escrow: str) -> EscrowState:
    """
    Pure. `owner` is the current token holder, None when the token has no
    holder (unminted or burned).
    """
    if owner is None:
        return EscrowState.CLOSED if burned else EscrowState.PENDING
    if owner == escrow:
        return EscrowState.STAGED
    return EscrowState.ACTIVE


def resolve_controller(
    state: EscrowState,
    owner: Optional[str],
    factory: str,
    beneficiary: str,
) -> str:
    if state in (EscrowState.PENDING, EscrowState.CLOSED):
        return factory
    if state is EscrowState.STAGED:
        return beneficiary
    return owner

"""
Escrow subsystem (FINAL / FROZEN)

- state   : WHO controls an escrow, derived from NFT ownership
- escrow  : one immutable escrow per beneficiary (claim / exit)
- factory : configuration + deterministic creation of escrows

Invariants:
- predicted escrow address depends only on (factory, account)
- 0 <= fee_bps <= 10000 everywhere
- protocol fee = floor(reward * fee_bps / 10000); the rest goes to the beneficiary
"""

from .escrow import HARVEST_ALL, MAX_BPS, Escrow
from .factory import EscrowFactory
from .salt import derive_salt
from .state import EscrowState, resolve_controller, resolve_state

__all__ = [
    "HARVEST_ALL",
    "MAX_BPS",
    "Escrow",
    "EscrowFactory",
    "derive_salt",
    "EscrowState",
    "resolve_controller",
    "resolve_state",
]

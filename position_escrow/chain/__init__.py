"""
Host World Model (FINAL / FROZEN)

Defines WHERE contracts live and HOW calls execute, independent of any
escrow semantics.

Invariants:
- Addresses are EIP-55 checksummed strings.
- State changes only inside call frames; a failing frame leaves no trace.
- A contract's mutable state lives in host storage, never on the instance.

Chain explicitly does NOT:
- Know about escrows, fees or positions
- Retry, schedule or time anything
"""

from .address import (
    account_address,
    ZERO_ADDRESS,
    address_bytes,
    create2_address,
    create_address,
    label_address,
    to_address,
)
from .contract import Contract, InitCode, external, view
from .events import ContractCreated, Event, Log, OwnershipTransferred
from .host import CallResult, Frame, Host
from .ownable import Ownable, only_owner
from .state import WorldState

__all__ = [
    "ZERO_ADDRESS",
    "account_address",
    "address_bytes",
    "create2_address",
    "create_address",
    "label_address",
    "to_address",
    "Contract",
    "InitCode",
    "external",
    "view",
    "ContractCreated",
    "Event",
    "Log",
    "OwnershipTransferred",
    "CallResult",
    "Frame",
    "Host",
    "Ownable",
    "only_owner",
    "WorldState",
]

#!filepath: position_escrow/chain/state.py
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING

from position_escrow.chain.events import Log

if TYPE_CHECKING:
    from position_escrow.chain.contract import Contract


@dataclass(frozen=True)
class Snapshot:
    balances: Dict[str, int]
    nonces: Dict[str, int]
    code: Dict[str, bytes]
    storage: Dict[str, Dict[str, Any]]
    contracts: Dict[str, "Contract"]
    log_size: int


@dataclass
class WorldState:
    """
    Everything a call can mutate.

    Contract instances only carry immutables; every mutable field a
    contract owns lives in `storage[address]`, so a snapshot of this
    object is a snapshot of the whole world.
    """

    balances: Dict[str, int] = field(default_factory=dict)
    nonces: Dict[str, int] = field(default_factory=dict)
    code: Dict[str, bytes] = field(default_factory=dict)
    storage: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    contracts: Dict[str, "Contract"] = field(default_factory=dict)
    logs: List[Log] = field(default_factory=list)

    # --------------------------------------------------
    def snapshot(self) -> Snapshot:
        return Snapshot(
            balances=dict(self.balances),
            nonces=dict(self.nonces),
            code=dict(self.code),
            storage=copy.deepcopy(self.storage),
            contracts=dict(self.contracts),
            log_size=len(self.logs),
        )

    # --------------------------------------------------
    def restore(self, snap: Snapshot) -> None:
        self.balances = dict(snap.balances)
        self.nonces = dict(snap.nonces)
        self.code = dict(snap.code)
        self.storage = copy.deepcopy(snap.storage)
        self.contracts = dict(snap.contracts)
        # log is append-only, truncation is enough
        del self.logs[snap.log_size:]

    # --------------------------------------------------
    def is_empty(self, address: str) -> bool:
        """
        No code and never used as a sender. create/create2 refuse
        anything else.
        """
        return not self.code.get(address) and self.nonces.get(address, 0) == 0

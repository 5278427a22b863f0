from __future__ import annotations

from dataclasses import dataclass


# -------------------------
# Base
# -------------------------
class Event:
    pass


@dataclass(frozen=True)
class Log:
    """
    One entry of the host event log: which contract emitted what.
    """
    address: str
    event: Event

    @property
    def name(self) -> str:
        return type(self.event).__name__


# -------------------------
# Shared
# -------------------------
@dataclass(frozen=True)
class OwnershipTransferred(Event):
    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class ContractCreated(Event):
    creator: str
    address: str
    runtime: str

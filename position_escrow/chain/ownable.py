#!filepath: position_escrow/chain/ownable.py
from __future__ import annotations

from functools import wraps
from typing import Callable

from position_escrow.chain.address import to_address
from position_escrow.chain.contract import Contract, external, view
from position_escrow.chain.events import OwnershipTransferred
from position_escrow.utils.errors import Unauthorized


def only_owner(fn: Callable) -> Callable:
    """
    Guard: msg.sender must equal the stored owner, else Unauthorized.
    Keeps the entry-point markers of the wrapped method.
    """

    @wraps(fn)
    def wrapper(self: "Ownable", *args, **kwargs):
        if self.msg_sender != self.storage.get("owner"):
            raise Unauthorized(f"{type(self).__name__}.{fn.__name__}: {self.msg_sender} is not owner")
        return fn(self, *args, **kwargs)

    return wrapper


class Ownable(Contract):
    """
    Single-admin contract. The deployer becomes owner.
    """

    def __init__(self, host, address: str) -> None:
        super().__init__(host, address)
        self._set_owner(self.msg_sender)

    def _set_owner(self, new_owner: str) -> None:
        previous = self.storage.get("owner")
        self.storage["owner"] = new_owner
        self.emit(OwnershipTransferred(previous_owner=previous or "", new_owner=new_owner))

    @view
    def owner(self) -> str:
        return self.storage["owner"]

    @external
    @only_owner
    def transfer_ownership(self, new_owner: str) -> None:
        self._set_owner(to_address(new_owner))

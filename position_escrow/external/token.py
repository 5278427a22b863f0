#!filepath: position_escrow/external/token.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from position_escrow.chain import (
    ZERO_ADDRESS,
    Event,
    Ownable,
    external,
    only_owner,
    to_address,
    view,
)
from position_escrow.external.interfaces import FungibleTokenLike
from position_escrow.utils.errors import Revert

# strict : returns True, reverts on failure
# silent : returns nothing, reverts on failure
# falsy  : returns True on success, False (no revert) on failure
ReturnMode = Literal["strict", "silent", "falsy"]


class InsufficientTokenBalance(Revert):
    pass


class InsufficientAllowance(Revert):
    pass


@dataclass(frozen=True)
class TokenTransfer(Event):
    frm: str
    to: str
    amount: int


@dataclass(frozen=True)
class TokenApproval(Event):
    owner: str
    spender: str
    amount: int


class FungibleToken(Ownable, FungibleTokenLike):

    def __init__(self, host, address: str, symbol: str = "TKN", mode: ReturnMode = "strict") -> None:
        super().__init__(host, address)
        if mode not in ("strict", "silent", "falsy"):
            raise Revert(f"unknown return mode {mode!r}")
        self.symbol = symbol
        self.mode = mode
        self.storage.update(balances={}, allowances={}, total_supply=0)

    # --------------------------------------------------
    @view
    def balance_of(self, account: str) -> int:
        return self.storage["balances"].get(to_address(account), 0)

    @view
    def allowance(self, owner: str, spender: str) -> int:
        return self.storage["allowances"].get((to_address(owner), to_address(spender)), 0)

    @view
    def total_supply(self) -> int:
        return self.storage["total_supply"]

    # --------------------------------------------------
    @external
    @only_owner
    def mint(self, to: str, amount: int) -> None:
        to = to_address(to)
        balances = self.storage["balances"]
        balances[to] = balances.get(to, 0) + amount
        self.storage["total_supply"] += amount
        self.emit(TokenTransfer(frm=ZERO_ADDRESS, to=to, amount=amount))

    @external
    def transfer(self, to: str, amount: int) -> Optional[bool]:
        if not self._move(self.msg_sender, to_address(to), amount):
            return False
        return self._ok()

    @external
    def transfer_from(self, frm: str, to: str, amount: int) -> Optional[bool]:
        frm, spender = to_address(frm), self.msg_sender
        key = (frm, spender)
        allowed = self.storage["allowances"].get(key, 0)
        if allowed < amount:
            if self.mode == "falsy":
                return False
            raise InsufficientAllowance(f"{spender} may spend {allowed} of {frm}, asked {amount}")

        if not self._move(frm, to_address(to), amount):
            return False
        self.storage["allowances"][key] = allowed - amount
        return self._ok()

    @external
    def approve(self, spender: str, amount: int) -> Optional[bool]:
        owner, spender = self.msg_sender, to_address(spender)
        self.storage["allowances"][(owner, spender)] = amount
        self.emit(TokenApproval(owner=owner, spender=spender, amount=amount))
        return self._ok()

    # --------------------------------------------------
    def _move(self, frm: str, to: str, amount: int) -> bool:
        balances = self.storage["balances"]
        have = balances.get(frm, 0)
        if amount < 0 or have < amount:
            if self.mode == "falsy":
                return False
            raise InsufficientTokenBalance(f"{frm} has {have}, needs {amount}")

        balances[frm] = have - amount
        balances[to] = balances.get(to, 0) + amount
        self.emit(TokenTransfer(frm=frm, to=to, amount=amount))
        return True

    def _ok(self) -> Optional[bool]:
        return None if self.mode == "silent" else True

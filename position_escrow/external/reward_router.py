#!filepath: position_escrow/external/reward_router.py
from __future__ import annotations

from dataclasses import dataclass

from position_escrow.chain import (
    ZERO_ADDRESS,
    Event,
    Ownable,
    external,
    only_owner,
    to_address,
    view,
)
from position_escrow.external.interfaces import RewardRouterLike
from position_escrow.utils.errors import Revert


class NoPendingTransfer(Revert):
    pass


class InvalidReceiver(Revert):
    pass


class RouterPaused(Revert):
    pass


@dataclass(frozen=True)
class TransferSignaled(Event):
    sender: str
    receiver: str


@dataclass(frozen=True)
class TransferAccepted(Event):
    sender: str
    receiver: str
    staked: int
    rewards: int


@dataclass(frozen=True)
class RewardsHandled(Event):
    account: str
    paid_native: int
    credited_wrapped: int
    compounded: bool


@dataclass(frozen=True)
class RewardsDistributed(Event):
    account: str
    amount: int


class RewardRouter(Ownable, RewardRouterLike):
    """
    In-memory reward system.

    Positions are plain staked amounts; yield accrues per account through
    payable `distribute` and is paid out by `handle_rewards`. Positions
    move between accounts only through signal_transfer → accept_transfer.
    """

    def __init__(self, host, address: str) -> None:
        super().__init__(host, address)
        self.storage.update(
            paused=False,
            staked={},
            rewards={},
            wrapped={},
            compounded={},
            pending={},
        )

    # --------------------------------------------------
    # views
    # --------------------------------------------------
    @view
    def pending_receivers(self, account: str) -> str:
        return self.storage["pending"].get(to_address(account), ZERO_ADDRESS)

    @view
    def staked_of(self, account: str) -> int:
        return self.storage["staked"].get(to_address(account), 0)

    @view
    def claimable(self, account: str) -> int:
        return self.storage["rewards"].get(to_address(account), 0)

    @view
    def wrapped_of(self, account: str) -> int:
        return self.storage["wrapped"].get(to_address(account), 0)

    # --------------------------------------------------
    # position transfer
    # --------------------------------------------------
    @external
    def signal_transfer(self, receiver: str) -> None:
        sender = self.msg_sender
        receiver = to_address(receiver)
        if receiver in (ZERO_ADDRESS, sender):
            raise InvalidReceiver(f"{sender} cannot signal transfer to {receiver}")

        self.storage["pending"][sender] = receiver
        self.emit(TransferSignaled(sender=sender, receiver=receiver))

    @external
    def accept_transfer(self, sender: str) -> None:
        receiver = self.msg_sender
        sender = to_address(sender)
        if self.storage["pending"].get(sender) != receiver:
            raise NoPendingTransfer(f"{sender} has not signaled a transfer to {receiver}")

        del self.storage["pending"][sender]

        staked = self.storage["staked"].pop(sender, 0)
        rewards = self.storage["rewards"].pop(sender, 0)
        self._credit("staked", receiver, staked)
        self._credit("rewards", receiver, rewards)

        self.emit(TransferAccepted(sender=sender, receiver=receiver, staked=staked, rewards=rewards))

    # --------------------------------------------------
    # staking / rewards
    # --------------------------------------------------
    @external
    def stake(self, amount: int) -> None:
        if amount <= 0:
            raise Revert(f"invalid stake amount {amount}")
        self._credit("staked", self.msg_sender, amount)

    @external(payable=True)
    def distribute(self, account: str) -> None:
        account = to_address(account)
        self._credit("rewards", account, self.msg_value)
        self.emit(RewardsDistributed(account=account, amount=self.msg_value))

    @external
    def handle_rewards(
        self,
        claim_primary: bool,
        stake_primary: bool,
        claim_secondary: bool,
        stake_secondary: bool,
        stake_bonus: bool,
        claim_yield: bool,
        convert_yield_to_native: bool,
    ) -> None:
        if self.storage["paused"]:
            raise RouterPaused("handle_rewards while paused")

        account = self.msg_sender
        compounded = any((stake_primary, stake_secondary, stake_bonus))
        if compounded:
            self._credit("compounded", account, 1)

        paid = credited = 0
        if claim_yield:
            amount = self.storage["rewards"].pop(account, 0)
            if convert_yield_to_native:
                paid = amount
            else:
                credited = amount
                self._credit("wrapped", account, amount)

        self.emit(RewardsHandled(account=account, paid_native=paid, credited_wrapped=credited, compounded=compounded))

        if paid:
            self.call(account, None, value=paid)

    @external
    @only_owner
    def set_paused(self, paused: bool) -> None:
        self.storage["paused"] = bool(paused)

    # --------------------------------------------------
    def _credit(self, slot: str, account: str, amount: int) -> None:
        if not amount:
            return
        book = self.storage[slot]
        book[account] = book.get(account, 0) + amount

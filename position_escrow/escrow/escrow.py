#!filepath: position_escrow/escrow/escrow.py
from __future__ import annotations

from typing import Optional, Tuple

from position_escrow.chain import Contract, external, to_address, view
from position_escrow.escrow.events import Claimed, Deposit, TransferOutSignaled
from position_escrow.escrow.state import EscrowState, resolve_controller, resolve_state
from position_escrow.external.position_controller import ERC721_RECEIVED
from position_escrow.transfer import transfer_native
from position_escrow.utils.errors import FeeOutOfBounds, Unauthorized
from position_escrow.utils.logger import logs

MAX_BPS = 10_000

# handle_rewards(claim/stake primary, claim/stake secondary, stake bonus,
# claim yield, convert yield to native): everything at once
HARVEST_ALL = (True, True, True, True, True, True, True)


class Escrow(Contract):
    """
    One escrow per beneficiary. Holds no mutable configuration.

    Whoever holds the position NFT `token_id` controls the escrow; see
    escrow.state for the resolution rules. Resolution is redone on every
    privileged call since the NFT can move at any time.
    """

    def __init__(
        self,
        host,
        address: str,
        fee_bps: int,
        beneficiary: str,
        factory: str,
        reward_router: str,
        position_controller: str,
        token_id: int,
    ) -> None:
        super().__init__(host, address)
        if not 0 <= fee_bps <= MAX_BPS:
            raise FeeOutOfBounds(f"fee_bps={fee_bps}")

        self.fee_bps = fee_bps
        self.beneficiary = to_address(beneficiary)
        self.factory = to_address(factory)
        self.reward_router = to_address(reward_router)
        self.position_controller = to_address(position_controller)
        self.token_id = token_id

    # ---------------------------------------------------------
    # controller resolution
    # ---------------------------------------------------------
    def _owner(self) -> Optional[str]:
        # owner_of reverts for unminted and burned tokens alike
        found = self.try_call(self.position_controller, "owner_of", self.token_id)
        return found.value if found.ok else None

    def _burned(self) -> bool:
        # optional controller extension; only labels PENDING vs CLOSED
        found = self.try_call(self.position_controller, "is_burned", self.token_id)
        return found.ok and found.value is True

    def _resolve(self) -> Tuple[EscrowState, Optional[str], str]:
        owner = self._owner()
        # an unowned token resolves to the factory either way
        state = resolve_state(owner, False, self.address)
        controller = resolve_controller(state, owner, self.factory, self.beneficiary)
        return state, owner, controller

    def _only_controller(self) -> Tuple[EscrowState, Optional[str], str]:
        state, owner, controller = self._resolve()
        if self.msg_sender != controller:
            raise Unauthorized(
                f"escrow {self.address} is controlled by {controller} (token holder {owner}), "
                f"caller {self.msg_sender}"
            )
        return state, owner, controller

    # ---------------------------------------------------------
    # read-only surface
    # ---------------------------------------------------------
    @view
    def get_seller(self) -> str:
        return self.beneficiary

    @view
    def get_factory(self) -> str:
        return self.factory

    @view
    def get_token_id(self) -> int:
        return self.token_id

    @view
    def get_fee_bps(self) -> int:
        return self.fee_bps

    @view
    def get_reward_router(self) -> str:
        return self.reward_router

    @view
    def get_position_controller(self) -> str:
        return self.position_controller

    @view
    def get_state(self) -> EscrowState:
        owner = self._owner()
        burned = owner is None and self._burned()
        return resolve_state(owner, burned, self.address)

    @view
    def get_controller(self) -> str:
        return self._resolve()[2]

    # ---------------------------------------------------------
    # controller-gated
    # ---------------------------------------------------------
    @external
    def accept_transfer_in(self) -> None:
        self._only_controller()
        self.call(self.reward_router, "accept_transfer", self.beneficiary)

    @external
    def signal_transfer_out(self) -> None:
        """
        Exit: pull in and burn the NFT, settle rewards, then hand the
        underlying position back to the resolved controller.
        """
        state, owner, controller = self._only_controller()

        # a STAGED escrow already holds its token
        if state is EscrowState.ACTIVE:
            self.call(self.position_controller, "safe_transfer_from", owner, self.address, self.token_id)
        self.call(self.position_controller, "burn", self.token_id)

        self._claim()

        self.call(self.reward_router, "signal_transfer", controller)
        self.emit(TransferOutSignaled(controller=controller, token_id=self.token_id))
        logs.info(f"[escrow] {self.address} signaled transfer out to {controller}")

    @external
    def claim(self) -> None:
        self._only_controller()
        self._claim()

    def _claim(self) -> int:
        """
        Harvest, then split only what the harvest added; any residual
        balance goes to the beneficiary untaxed. Returns the fee.
        """
        before = self.balance

        # best-effort: a reverted harvest counts as "nothing to claim"
        harvest = self.try_call(self.reward_router, "handle_rewards", *HARVEST_ALL)
        if not harvest.ok:
            logs.warning(
                f"[escrow] harvest reverted for {self.address}: "
                f"{type(harvest.error).__name__}: {harvest.error}"
            )

        reward = self.balance - before
        fee = reward * self.fee_bps // MAX_BPS

        transfer_native(self, self.factory, fee)
        payout = self.balance
        transfer_native(self, self.beneficiary, payout)

        self.emit(Claimed(
            beneficiary=self.beneficiary,
            reward=reward,
            fee=fee,
            payout=payout,
            harvested=harvest.ok,
        ))
        logs.info(f"[escrow] {self.address} claimed reward={reward} fee={fee} payout={payout}")
        return fee

    # ---------------------------------------------------------
    # hooks
    # ---------------------------------------------------------
    def receive(self) -> None:
        self.emit(Deposit(sender=self.msg_sender, amount=self.msg_value))

    @view
    def on_erc721_received(self, operator: str, frm: str, token_id: int, data: bytes = b"") -> bytes:
        return ERC721_RECEIVED

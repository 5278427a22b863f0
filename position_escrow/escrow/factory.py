#!filepath: position_escrow/escrow/factory.py
from __future__ import annotations

from typing import Tuple

from position_escrow.chain import (
    ZERO_ADDRESS,
    InitCode,
    Ownable,
    external,
    only_owner,
    to_address,
    view,
)
from position_escrow.deployer import create3
from position_escrow.escrow.escrow import MAX_BPS, Escrow
from position_escrow.escrow.events import (
    EscrowControllerUpdated,
    EscrowDeployed,
    FeeBasisPointsUpdated,
    RewardRouterUpdated,
    Withdrawn,
)
from position_escrow.escrow.salt import derive_salt
from position_escrow.transfer import transfer_native, transfer_token
from position_escrow.utils.errors import (
    ConfigurationMissing,
    FeeOutOfBounds,
    NoTransferSignaled,
    NotAContract,
)
from position_escrow.utils.logger import logs


def _check_fee(fee_bps: int) -> int:
    if not isinstance(fee_bps, int) or not 0 <= fee_bps <= MAX_BPS:
        raise FeeOutOfBounds(f"fee_bps must be within [0, {MAX_BPS}], got {fee_bps!r}")
    return fee_bps


class EscrowFactory(Ownable):
    """
    Escrow Factory (FINAL / FROZEN)

    Semantics:
      - one deterministic escrow address per account, known before deployment
      - escrows snapshot fee_bps at creation; later fee changes never reach them
      - create_escrow is bound to a transfer the account already signaled on
        the reward router towards its predicted escrow address

    Storage:
      owner, fee_bps, reward_router, position_controller
    """

    def __init__(
        self,
        host,
        address: str,
        fee_bps: int = 0,
        reward_router: str = ZERO_ADDRESS,
        position_controller: str = ZERO_ADDRESS,
    ) -> None:
        super().__init__(host, address)
        self.storage.update(
            fee_bps=_check_fee(fee_bps),
            reward_router=to_address(reward_router),
            position_controller=to_address(position_controller),
        )

    # --------------------------------------------------
    # configuration (owner only)
    # --------------------------------------------------
    @external
    @only_owner
    def set_fee_basis_points(self, fee_bps: int) -> None:
        previous = self.storage["fee_bps"]
        self.storage["fee_bps"] = _check_fee(fee_bps)
        self.emit(FeeBasisPointsUpdated(previous=previous, current=fee_bps))
        logs.info(f"[factory] fee_bps {previous} -> {fee_bps}")

    @external
    @only_owner
    def set_reward_router(self, reward_router: str) -> None:
        previous = self.storage["reward_router"]
        self.storage["reward_router"] = to_address(reward_router)
        self.emit(RewardRouterUpdated(previous=previous, current=self.storage["reward_router"]))
        logs.info(f"[factory] reward_router {previous} -> {self.storage['reward_router']}")

    @external
    @only_owner
    def set_escrow_controller(self, position_controller: str) -> None:
        previous = self.storage["position_controller"]
        self.storage["position_controller"] = to_address(position_controller)
        self.emit(EscrowControllerUpdated(previous=previous, current=self.storage["position_controller"]))
        logs.info(f"[factory] position_controller {previous} -> {self.storage['position_controller']}")

    @external
    @only_owner
    def transfer_controller_ownership(self, new_owner: str) -> None:
        controller = self.storage["position_controller"]
        if controller == ZERO_ADDRESS:
            raise ConfigurationMissing("position_controller is not set")
        self.call(controller, "transfer_ownership", to_address(new_owner))

    @external
    @only_owner
    def withdraw(self) -> int:
        owner, amount = self.storage["owner"], self.balance
        transfer_native(self, owner, amount)
        self.emit(Withdrawn(to=owner, amount=amount, token=ZERO_ADDRESS))
        return amount

    @external
    @only_owner
    def withdraw_token(self, token: str) -> int:
        token = to_address(token)
        if not self.code_at(token):
            raise NotAContract(f"token {token} has no code")

        owner = self.storage["owner"]
        amount = self.call(token, "balance_of", self.address)
        transfer_token(self, token, owner, amount)
        self.emit(Withdrawn(to=owner, amount=amount, token=token))
        return amount

    # --------------------------------------------------
    # views
    # --------------------------------------------------
    @view
    def get_fee_bps(self) -> int:
        return self.storage["fee_bps"]

    @view
    def get_reward_router(self) -> str:
        return self.storage["reward_router"]

    @view
    def get_position_controller(self) -> str:
        return self.storage["position_controller"]

    @view
    def salt_of(self, account: str) -> bytes:
        return derive_salt(self.address, account)

    @view
    def predict_escrow(self, account: str) -> str:
        return create3.predict_address(self.address, self.salt_of(account))

    @view
    def get_escrow(self, account: str) -> str:
        return self.predict_escrow(account)

    @view
    def is_escrow_deployed(self, account: str) -> bool:
        return bool(self.code_at(self.predict_escrow(account)))

    # --------------------------------------------------
    # orchestration
    # --------------------------------------------------
    def _require_configured(self) -> Tuple[str, str]:
        router = self.storage["reward_router"]
        controller = self.storage["position_controller"]
        if router == ZERO_ADDRESS:
            raise ConfigurationMissing("reward_router is not set")
        if controller == ZERO_ADDRESS:
            raise ConfigurationMissing("position_controller is not set")
        return router, controller

    @external
    def create_escrow(self) -> str:
        """
        1. require router + controller
        2. predict the caller's escrow
        3. require router.pending_receivers(caller) == predicted
        4. mint the position NFT to this factory, tagged with the escrow
        5. deploy the escrow at the predicted address
        6. escrow.accept_transfer_in() (factory controls it for now)
        7. hand the NFT to the caller
        """
        router, controller = self._require_configured()

        account = self.msg_sender
        salt = self.salt_of(account)
        escrow = create3.predict_address(self.address, salt)

        pending = self.call(router, "pending_receivers", account)
        if pending != escrow:
            raise NoTransferSignaled(
                f"{account} must signal_transfer to {escrow} first (pending: {pending})"
            )

        token_id = self.call(controller, "mint", self.address, escrow)

        fee_bps = self.storage["fee_bps"]
        payload = InitCode.of(Escrow, fee_bps, account, self.address, router, controller, token_id)
        create3.deploy(self, salt, payload)

        self.call(escrow, "accept_transfer_in")
        self.call(controller, "safe_transfer_from", self.address, account, token_id)

        self.emit(EscrowDeployed(account=account, escrow=escrow, token_id=token_id, fee_bps=fee_bps))
        logs.info(f"[factory] escrow {escrow} created for {account} (token {token_id}, fee_bps {fee_bps})")
        return escrow

    # --------------------------------------------------
    def receive(self) -> None:
        # protocol fees; swept by withdraw()
        pass

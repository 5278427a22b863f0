#!filepath: position_escrow/workflows/lifecycle.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from position_escrow.chain import Host, account_address, label_address
from position_escrow.config.app_config import AppConfig
from position_escrow.config.factory_config import FactoryConfig
from position_escrow.escrow import EscrowFactory
from position_escrow.escrow.events import Claimed
from position_escrow.external import PositionController, RewardRouter
from position_escrow.utils.errors import DeploymentFailed
from position_escrow.utils.logger import logs

# funds reward distributions in the simulation
DISTRIBUTOR = label_address("reward-distributor")


@dataclass(frozen=True)
class System:
    host: Host
    owner: str
    factory: EscrowFactory
    router: RewardRouter
    controller: PositionController


@dataclass(frozen=True)
class AccountReport:
    account: str
    escrow: str
    token_id: int
    reward: int
    fee: int
    payout: int
    exited: bool


@dataclass
class LifecycleReport:
    factory: str
    fee_bps: int
    accounts: List[AccountReport] = field(default_factory=list)
    withdrawn: int = 0

    @property
    def total_fee(self) -> int:
        return sum(a.fee for a in self.accounts)

    @property
    def total_payout(self) -> int:
        return sum(a.payout for a in self.accounts)


@logs.catch()
def deploy_system(host: Host, cfg: FactoryConfig) -> System:
    """
    owner deploys router + controller + factory, then hands the
    controller to the factory so it can mint.
    """
    owner = account_address(cfg.owner)

    router = host.deploy(owner, RewardRouter)
    controller = host.deploy(owner, PositionController)
    factory = host.deploy(owner, EscrowFactory, cfg.fee_bps, router.address, controller.address)

    host.transact(owner, controller.address, "transfer_ownership", factory.address)

    logs.info(f"[lifecycle] factory {factory.address} ready (fee_bps={cfg.fee_bps})")
    return System(host=host, owner=owner, factory=factory, router=router, controller=controller)


def open_escrow(system: System, account: str, stake: int) -> str:
    """
    stake → signal transfer to the predicted escrow → create_escrow
    """
    host, factory, router = system.host, system.factory, system.router

    host.transact(account, router.address, "stake", stake)

    predicted = factory.predict_escrow(account)
    host.transact(account, router.address, "signal_transfer", predicted)

    escrow = host.transact(account, factory.address, "create_escrow")
    if escrow != predicted:
        raise DeploymentFailed(f"escrow for {account} landed at {escrow}, predicted {predicted}")
    return escrow


@logs.catch(msg="lifecycle run failed", log_time=True)
def run_lifecycle(cfg: AppConfig, host: Host | None = None) -> LifecycleReport:
    host = host or Host()
    system = deploy_system(host, cfg.factory)
    sim = cfg.simulation

    report = LifecycleReport(factory=system.factory.address, fee_bps=cfg.factory.fee_bps)

    for label in sim.accounts:
        account = account_address(label)
        escrow = open_escrow(system, account, sim.stake)
        token_id = host.contract_at(escrow).get_token_id()

        if sim.reward:
            host.fund(DISTRIBUTOR, sim.reward)
            host.transact(DISTRIBUTOR, system.router.address, "distribute", escrow, value=sim.reward)

        method = "signal_transfer_out" if sim.exit else "claim"
        host.transact(account, escrow, method)

        claimed = host.events(Claimed, address=escrow)[-1]
        report.accounts.append(AccountReport(
            account=account,
            escrow=escrow,
            token_id=token_id,
            reward=claimed.reward,
            fee=claimed.fee,
            payout=claimed.payout,
            exited=sim.exit,
        ))

    report.withdrawn = host.transact(system.owner, system.factory.address, "withdraw")

    logs.info(
        f"[lifecycle] {len(report.accounts)} escrows, fee={report.total_fee}, "
        f"payout={report.total_payout}, withdrawn={report.withdrawn}"
    )
    return report

# tests/conftest.py
from __future__ import annotations

import pytest
from loguru import logger

from position_escrow.chain import Host, label_address
from position_escrow.config.factory_config import FactoryConfig
from position_escrow.workflows.lifecycle import System, deploy_system, open_escrow


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def host() -> Host:
    return Host()


@pytest.fixture
def owner() -> str:
    return label_address("owner")


@pytest.fixture
def alice() -> str:
    return label_address("alice")


@pytest.fixture
def bob() -> str:
    return label_address("bob")


@pytest.fixture
def mallory() -> str:
    return label_address("mallory")


@pytest.fixture
def distributor(host: Host) -> str:
    addr = label_address("distributor")
    host.fund(addr, 10**24)
    return addr


@pytest.fixture
def make_system(host: Host):
    """
    Factory fixture for a fully wired System.

    Usage:
        system = make_system()
        system = make_system(fee_bps=0)
    """

    def _make(fee_bps: int = 490, owner: str = "owner") -> System:
        return deploy_system(host, FactoryConfig(fee_bps=fee_bps, owner=owner))

    return _make


@pytest.fixture
def system(make_system) -> System:
    return make_system()


@pytest.fixture
def open_for(system: System):
    """
    Open an escrow for an account: stake, signal, create.
    """

    def _open(account: str, stake: int = 1_000) -> str:
        return open_escrow(system, account, stake)

    return _open


@pytest.fixture
def reward(host: Host, system: System, distributor: str):
    """
    Accrue native yield for an escrow on the reward router.
    """

    def _reward(escrow: str, amount: int) -> None:
        host.transact(distributor, system.router.address, "distribute", escrow, value=amount)

    return _reward

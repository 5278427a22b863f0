#!filepath: tests/external/test_reward_router.py
import pytest

from position_escrow.chain import ZERO_ADDRESS, Contract, external
from position_escrow.external import NoPendingTransfer, RewardRouter, RouterPaused
from position_escrow.external.reward_router import InvalidReceiver, RewardsHandled
from position_escrow.utils.errors import Unauthorized


class Harvester(Contract):
    """Claims its own rewards; accepts native value."""

    @external
    def harvest(self, router, convert):
        self.call(router, "handle_rewards", True, False, True, False, False, True, convert)

    def receive(self):
        pass


@pytest.fixture
def router(host, owner) -> RewardRouter:
    return host.deploy(owner, RewardRouter)


def test_signal_then_accept_moves_the_position(host, router, alice, bob, distributor):
    host.transact(alice, router.address, "stake", 700)
    host.transact(distributor, router.address, "distribute", alice, value=50)

    host.transact(alice, router.address, "signal_transfer", bob)
    assert router.pending_receivers(alice) == bob

    host.transact(bob, router.address, "accept_transfer", alice)

    assert router.pending_receivers(alice) == ZERO_ADDRESS
    assert (router.staked_of(bob), router.claimable(bob)) == (700, 50)
    assert (router.staked_of(alice), router.claimable(alice)) == (0, 0)


def test_accept_without_signal_fails(host, router, alice, bob):
    with pytest.raises(NoPendingTransfer):
        host.transact(bob, router.address, "accept_transfer", alice)


def test_accept_by_wrong_receiver_fails(host, router, alice, bob, mallory):
    host.transact(alice, router.address, "signal_transfer", bob)

    with pytest.raises(NoPendingTransfer):
        host.transact(mallory, router.address, "accept_transfer", alice)


@pytest.mark.parametrize("receiver", ["zero", "self"])
def test_signal_rejects_invalid_receiver(host, router, alice, receiver):
    target = ZERO_ADDRESS if receiver == "zero" else alice

    with pytest.raises(InvalidReceiver):
        host.transact(alice, router.address, "signal_transfer", target)


def test_handle_rewards_pays_native(host, router, alice, distributor):
    harvester = host.deploy(alice, Harvester)
    host.transact(distributor, router.address, "distribute", harvester.address, value=400)

    host.transact(alice, harvester.address, "harvest", router.address, True)

    assert host.balance_of(harvester.address) == 400
    assert router.claimable(harvester.address) == 0
    assert host.events(RewardsHandled)[-1].paid_native == 400


def test_handle_rewards_without_conversion_credits_wrapped(host, router, alice, distributor):
    harvester = host.deploy(alice, Harvester)
    host.transact(distributor, router.address, "distribute", harvester.address, value=400)

    host.transact(alice, harvester.address, "harvest", router.address, False)

    assert host.balance_of(harvester.address) == 0
    assert router.wrapped_of(harvester.address) == 400


def test_paused_router_reverts_harvest(host, router, owner, alice, mallory):
    host.transact(owner, router.address, "set_paused", True)

    with pytest.raises(RouterPaused):
        host.transact(alice, router.address, "handle_rewards", *([True] * 7))
    with pytest.raises(Unauthorized):
        host.transact(mallory, router.address, "set_paused", False)

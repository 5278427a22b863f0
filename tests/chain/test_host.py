#!filepath: tests/chain/test_host.py
from dataclasses import dataclass

import pytest
from eth_utils import keccak

from position_escrow.chain import (
    Contract,
    Event,
    InitCode,
    create2_address,
    create_address,
    external,
    view,
)
from position_escrow.utils.errors import (
    InsufficientBalance,
    Revert,
    UnknownMethod,
    ValueRejected,
)


# ======================================================
# Helpers
# ======================================================
@dataclass(frozen=True)
class Bumped(Event):
    count: int


class Counter(Contract):
    def __init__(self, host, address, start=0):
        super().__init__(host, address)
        self.storage["count"] = start

    @view
    def count(self):
        return self.storage["count"]

    @external
    def increment(self):
        self.storage["count"] += 1
        self.emit(Bumped(self.storage["count"]))
        return self.storage["count"]

    @external
    def increment_then_fail(self):
        self.storage["count"] += 1
        self.emit(Bumped(self.storage["count"]))
        raise Revert("boom")

    @external
    def broken(self):
        raise TypeError("not a revert")

    @external(payable=True)
    def deposit(self):
        return self.msg_value

    def _secret(self):
        return 42


class Caller(Contract):
    @external
    def poke(self, target):
        self.storage["pokes"] = self.storage.get("pokes", 0) + 1
        return self.try_call(target, "increment_then_fail")

    @external
    def poke_broken(self, target):
        self.storage["pokes"] = self.storage.get("pokes", 0) + 1
        return self.try_call(target, "broken")


class Exploding(Contract):
    def __init__(self, host, address):
        super().__init__(host, address)
        raise Revert("constructor")


class Hollow(Contract):
    RUNTIME_CODE = b""


SALT = b"\x11" * 32


# ======================================================
# calls
# ======================================================
def test_transact_commits_state_and_events(host, alice):
    counter = host.deploy(alice, Counter, 5)

    assert host.transact(alice, counter.address, "increment") == 6
    assert counter.count() == 6
    assert host.events(Bumped, address=counter.address) == [Bumped(6)]


def test_reverted_transact_leaves_no_trace(host, alice):
    counter = host.deploy(alice, Counter)
    logs_before = len(host.state.logs)

    with pytest.raises(Revert, match="boom"):
        host.transact(alice, counter.address, "increment_then_fail")

    assert counter.count() == 0
    assert len(host.state.logs) == logs_before


def test_try_call_rolls_back_only_the_inner_frame(host, alice):
    counter = host.deploy(alice, Counter)
    caller = host.deploy(alice, Caller)

    result = host.transact(alice, caller.address, "poke", counter.address)

    assert result.ok is False
    assert isinstance(result.error, Revert)
    assert counter.count() == 0
    assert caller.storage["pokes"] == 1
    assert host.events(Bumped) == []


def test_try_call_propagates_non_revert_errors(host, alice):
    counter = host.deploy(alice, Counter)
    caller = host.deploy(alice, Caller)

    with pytest.raises(TypeError):
        host.transact(alice, caller.address, "poke_broken", counter.address)

    assert "pokes" not in caller.storage


def test_call_to_account_without_code_returns_nothing(host, alice, bob):
    assert host.transact(alice, bob, "transfer", alice, 10) is None


def test_private_and_unmarked_methods_are_not_callable(host, alice):
    counter = host.deploy(alice, Counter)

    with pytest.raises(UnknownMethod):
        host.transact(alice, counter.address, "_secret")
    with pytest.raises(UnknownMethod):
        host.transact(alice, counter.address, "storage")


def test_value_rules(host, alice):
    counter = host.deploy(alice, Counter)
    host.fund(alice, 100)

    assert host.transact(alice, counter.address, "deposit", value=40) == 40
    assert host.balance_of(counter.address) == 40
    assert host.balance_of(alice) == 60

    with pytest.raises(ValueRejected):
        host.transact(alice, counter.address, "increment", value=1)
    with pytest.raises(ValueRejected):
        host.transact(alice, counter.address, None, value=1)
    with pytest.raises(InsufficientBalance):
        host.transact(alice, counter.address, "deposit", value=61)

    assert host.balance_of(alice) == 60
    assert counter.count() == 0


def test_transact_cannot_nest(host, alice):
    class Nester(Contract):
        @external
        def nest(self):
            self.host.transact(alice, self.address, "nest")

    nester = host.deploy(alice, Nester)
    with pytest.raises(RuntimeError):
        host.transact(alice, nester.address, "nest")


# ======================================================
# creation
# ======================================================
def test_create_uses_sender_nonce(host, alice):
    expected = create_address(alice, 0)
    counter = host.deploy(alice, Counter)

    assert counter.address == expected
    assert host.nonce_of(alice) == 1
    assert host.nonce_of(counter.address) == 1
    assert host.code_at(counter.address) == Counter.runtime_code()


def test_create2_address_and_collision(host, alice):
    init = InitCode.of(Counter, 3)
    expected = create2_address(alice, SALT, keccak(init.bytecode))

    assert host.create2(alice, SALT, init) == expected
    assert host.contract_at(expected).count() == 3

    assert host.create2(alice, SALT, init) is None


def test_reverting_constructor_creates_nothing(host, alice):
    init = InitCode.of(Exploding)
    expected = create2_address(alice, SALT, keccak(init.bytecode))

    assert host.create2(alice, SALT, init) is None
    assert host.code_at(expected) == b""
    assert host.nonce_of(expected) == 0


def test_empty_runtime_leaves_account_without_code(host, alice):
    init = InitCode.of(Hollow)
    address = host.create2(alice, SALT, init)

    assert address is not None
    assert host.code_at(address) == b""
    assert host.contract_at(address) is None
    # the account is used now; the salt cannot be reused
    assert host.create2(alice, SALT, init) is None

#!filepath: tests/deployer/test_create3.py
import pytest
from eth_utils import keccak

from position_escrow.chain import (
    Contract,
    Host,
    InitCode,
    address_bytes,
    create2_address,
    to_address,
    view,
)
from position_escrow.deployer import (
    RELAY_BYTECODE_HASH,
    Deployed,
    DeterministicDeployer,
    predict_address,
)
from position_escrow.utils.errors import DeploymentFailed, InitializationFailed, Revert


# ======================================================
# Helpers
# ======================================================
class Box(Contract):
    def __init__(self, host, address, value):
        super().__init__(host, address)
        self.value = value

    @view
    def get(self):
        return self.value


class BigBox(Box):
    """Same behaviour, different runtime code."""


class Refusing(Contract):
    def __init__(self, host, address):
        super().__init__(host, address)
        raise Revert("no")


class Hollow(Contract):
    RUNTIME_CODE = b""


SALT = keccak(text="salt-1")
OTHER_SALT = keccak(text="salt-2")


@pytest.fixture
def deployer(host, alice) -> DeterministicDeployer:
    return host.deploy(alice, DeterministicDeployer)


# ======================================================
# prediction
# ======================================================
def test_prediction_matches_relay_formula(deployer):
    relay = create2_address(deployer.address, SALT, RELAY_BYTECODE_HASH)
    expected = to_address(keccak(b"\xd6\x94" + address_bytes(relay) + b"\x01")[12:])

    assert predict_address(deployer.address, SALT) == expected
    assert deployer.predict(SALT) == expected


def test_prediction_is_stable_across_deployment(host, alice, deployer):
    before = deployer.predict(SALT)
    deployed = host.transact(alice, deployer.address, "deploy", SALT, InitCode.of(Box, 1))
    after = deployer.predict(SALT)

    assert before == deployed == after
    assert host.contract_at(deployed).get() == 1


def test_address_does_not_depend_on_payload(alice):
    addresses = []
    for payload in (InitCode.of(Box, 1), InitCode.of(BigBox, "x" * 10_000)):
        host = Host()
        deployer = host.deploy(alice, DeterministicDeployer)
        addresses.append(host.transact(alice, deployer.address, "deploy", SALT, payload))

    assert addresses[0] == addresses[1]


def test_address_depends_on_deployer_and_salt(host, alice, bob, deployer):
    other = host.deploy(bob, DeterministicDeployer)

    assert deployer.predict(SALT) != deployer.predict(OTHER_SALT)
    assert deployer.predict(SALT) != other.predict(SALT)


# ======================================================
# deployment
# ======================================================
def test_deploy_emits_record(host, alice, deployer):
    deployed = host.transact(alice, deployer.address, "deploy", SALT, InitCode.of(Box, 7))

    records = host.events(Deployed, address=deployer.address)
    assert records == [Deployed(salt="0x" + SALT.hex(), address=deployed, runtime="Box")]


def test_second_deploy_at_same_salt_fails(host, alice, bob, deployer):
    first = host.transact(alice, deployer.address, "deploy", SALT, InitCode.of(Box, 1))

    with pytest.raises(DeploymentFailed):
        host.transact(bob, deployer.address, "deploy", SALT, InitCode.of(BigBox, 2))

    assert host.contract_at(first).get() == 1
    assert type(host.contract_at(first)) is Box


def test_reverting_payload_fails_initialization_and_frees_salt(host, alice, deployer):
    with pytest.raises(InitializationFailed):
        host.transact(alice, deployer.address, "deploy", SALT, InitCode.of(Refusing))

    relay = create2_address(deployer.address, SALT, RELAY_BYTECODE_HASH)
    assert host.code_at(relay) == b""

    # whole call rolled back: the salt is still free
    deployed = host.transact(alice, deployer.address, "deploy", SALT, InitCode.of(Box, 3))
    assert host.contract_at(deployed).get() == 3


def test_payload_without_code_fails_initialization(host, alice, deployer):
    with pytest.raises(InitializationFailed):
        host.transact(alice, deployer.address, "deploy", SALT, InitCode.of(Hollow))

    assert host.code_at(deployer.predict(SALT)) == b""


def test_value_is_forwarded_to_the_payload(host, alice, deployer):
    host.fund(alice, 1_000)

    deployed = host.transact(alice, deployer.address, "deploy", SALT, InitCode.of(Box, 0), value=250)

    assert host.balance_of(deployed) == 250
    assert host.balance_of(deployer.address) == 0
    assert host.balance_of(alice) == 750

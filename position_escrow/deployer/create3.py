#!filepath: position_escrow/deployer/create3.py
"""
Two-stage deterministic deployment.

Stage 1 creates a fixed-bytecode relay with create2 at an address that
depends only on (deployer, salt). Stage 2 has the relay create the real
payload with its first nonce, so the final address is

    keccak(0xd6 ++ 0x94 ++ relay ++ 0x01)[12:]

and never depends on the payload.
"""
from __future__ import annotations

from typing import Optional

from eth_utils import keccak

from position_escrow.chain import (
    Contract,
    InitCode,
    create2_address,
    create_address,
    external,
)
from position_escrow.utils.errors import DeploymentFailed, InitializationFailed
from position_escrow.utils.logger import logs

# creation code of the relay; its runtime is RELAY_RUNTIME below
RELAY_BYTECODE = bytes.fromhex("67363d3d37363d34f03d5260086018f3")
RELAY_BYTECODE_HASH = keccak(RELAY_BYTECODE)
RELAY_RUNTIME = bytes.fromhex("363d3d37363d34f0")

# contract accounts start at nonce 1
RELAY_CREATE_NONCE = 1


class Relay(Contract):
    """
    Forwards its call payload to `create` and returns whatever that
    yields; it never reverts on its own.
    """

    RUNTIME_CODE = RELAY_RUNTIME

    @external(payable=True)
    def execute(self, payload: InitCode) -> Optional[str]:
        return self.host.create(self.address, payload, value=self.msg_value)


RELAY_INIT_CODE = InitCode(runtime=Relay, args=(), bytecode=RELAY_BYTECODE)


def predict_address(deployer: str, salt: bytes) -> str:
    """
    Pure; same answer before and after deployment, for any payload.
    """
    relay = create2_address(deployer, salt, RELAY_BYTECODE_HASH)
    return create_address(relay, RELAY_CREATE_NONCE)


def deploy(caller: Contract, salt: bytes, payload: InitCode, value: int = 0) -> str:
    """
    Deploy `payload` at predict_address(caller.address, salt).

    Must run inside one of `caller`'s call frames; `value` is taken from
    the caller's balance.
    """
    relay = caller.host.create2(caller.address, salt, RELAY_INIT_CODE)
    if relay is None or not caller.code_at(relay):
        raise DeploymentFailed(f"salt 0x{salt.hex()} already used by {caller.address}")

    deployed = predict_address(caller.address, salt)

    result = caller.try_call(relay, "execute", payload, value=value)
    if not result.ok or not caller.code_at(deployed):
        raise InitializationFailed(
            f"{payload.runtime.__name__} left no code at {deployed}"
        )

    logs.debug(f"[create3] {payload.runtime.__name__} deployed at {deployed} (relay {relay})")
    return deployed

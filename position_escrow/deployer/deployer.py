#!filepath: position_escrow/deployer/deployer.py
from __future__ import annotations

from dataclasses import dataclass

from position_escrow.chain import Contract, Event, InitCode, external, view
from position_escrow.deployer import create3


@dataclass(frozen=True)
class Deployed(Event):
    salt: str
    address: str
    runtime: str


class DeterministicDeployer(Contract):
    """
    Stand-alone deployer: anyone can deploy a payload at an address that
    depends only on (this deployer, salt).
    """

    @external(payable=True)
    def deploy(self, salt: bytes, payload: InitCode) -> str:
        address = create3.deploy(self, salt, payload, value=self.msg_value)
        self.emit(Deployed(salt="0x" + salt.hex(), address=address, runtime=payload.runtime.__name__))
        return address

    @view
    def predict(self, salt: bytes) -> str:
        return create3.predict_address(self.address, salt)

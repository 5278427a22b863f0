# position_escrow/escrow/salt.py
from __future__ import annotations

from eth_abi import encode
from eth_utils import keccak

from position_escrow.chain import to_address


def derive_salt(factory: str, account: str) -> bytes:
    """
    keccak(abi.encode(factory, account)); one account → one salt per factory.
    """
    return keccak(encode(["address", "address"], [to_address(factory), to_address(account)]))

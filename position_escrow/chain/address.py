#!filepath: position_escrow/chain/address.py
from __future__ import annotations

from typing import Union

import rlp
from eth_utils import (
    is_address,
    keccak,
    to_canonical_address,
    to_checksum_address,
)

from position_escrow.utils.errors import UserInputError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

AddressLike = Union[str, bytes]


def to_address(value: AddressLike) -> str:
    """
    Normalize to an EIP-55 checksummed hex string.
    All addresses handled by the host are in this form.
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise UserInputError(f"address must be 20 bytes, got {len(value)}")
        return to_checksum_address(bytes(value))

    if not is_address(value):
        raise UserInputError(f"invalid address: {value!r}")
    return to_checksum_address(value)


def address_bytes(address: AddressLike) -> bytes:
    return to_canonical_address(to_address(address))


def label_address(label: str) -> str:
    """
    Stable externally-owned address for a human label ("alice", "owner").
    """
    return to_checksum_address(keccak(text=label)[12:])


def create_address(sender: AddressLike, nonce: int) -> str:
    """
    keccak(rlp([sender, nonce]))[12:]
    """
    encoded = rlp.encode([address_bytes(sender), nonce])
    return to_checksum_address(keccak(encoded)[12:])


def create2_address(sender: AddressLike, salt: bytes, code_hash: bytes) -> str:
    """
    keccak(0xff ++ sender ++ salt ++ code_hash)[12:]
    """
    if len(salt) != 32:
        raise UserInputError(f"salt must be 32 bytes, got {len(salt)}")
    if len(code_hash) != 32:
        raise UserInputError(f"code hash must be 32 bytes, got {len(code_hash)}")

    return to_checksum_address(
        keccak(b"\xff" + address_bytes(sender) + salt + code_hash)[12:]
    )


def account_address(value: str) -> str:
    """
    "0x…" → checksummed address; anything else is treated as a label.
    """
    if value.startswith("0x"):
        return to_address(value)
    return label_address(value)

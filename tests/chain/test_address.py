import pytest

from position_escrow.chain import (
    ZERO_ADDRESS,
    account_address,
    create2_address,
    create_address,
    label_address,
    to_address,
)
from position_escrow.utils.errors import UserInputError


def test_to_address_checksums():
    raw = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
    assert to_address(raw) == "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
    assert to_address(bytes.fromhex(raw[2:])) == to_address(raw)


def test_to_address_rejects_garbage():
    with pytest.raises(UserInputError):
        to_address("0x1234")
    with pytest.raises(UserInputError):
        to_address(b"\x00" * 19)


def test_label_address_is_stable_and_distinct():
    assert label_address("alice") == label_address("alice")
    assert label_address("alice") != label_address("bob")
    assert account_address("alice") == label_address("alice")
    assert account_address(ZERO_ADDRESS) == ZERO_ADDRESS


def test_create_address_known_vector():
    # first two contracts created by this sender
    sender = "0x6ac7ea33f8831ea9dcc53393aaa88b25a785dbf0"
    assert create_address(sender, 0).lower() == "0xcd234a471b72ba2f1ccf0a70fcaba648a5eecd8d"
    assert create_address(sender, 1).lower() == "0x343c43a37d37dff08ae8c4a11544c718abb4fcf8"


def test_create2_address_eip1014_vector():
    # EIP-1014 example 0
    assert create2_address(
        ZERO_ADDRESS,
        b"\x00" * 32,
        bytes.fromhex("bc36789e7a1e281436464229828f817d6612f7b477d66591ff96a9e064bcc98a"),
    ).lower() == "0x4d1a2e2bb4f88f0250f26ffff098b0b30b26bf38"


def test_create2_address_validates_lengths():
    with pytest.raises(UserInputError):
        create2_address(ZERO_ADDRESS, b"\x00" * 31, b"\x00" * 32)

#!filepath: position_escrow/external/position_controller.py
from __future__ import annotations

from dataclasses import dataclass

from eth_utils import keccak

from position_escrow.chain import (
    ZERO_ADDRESS,
    Event,
    Ownable,
    external,
    only_owner,
    to_address,
    view,
)
from position_escrow.external.interfaces import PositionControllerLike
from position_escrow.utils.errors import Revert, Unauthorized

ERC721_RECEIVED = keccak(text="onERC721Received(address,address,uint256,bytes)")[:4]


class TokenNotMinted(Revert):
    pass


class NotTokenOwner(Revert):
    pass


class UnsafeRecipient(Revert):
    pass


@dataclass(frozen=True)
class Transfer(Event):
    frm: str
    to: str
    token_id: int


@dataclass(frozen=True)
class Approval(Event):
    owner: str
    approved: str
    token_id: int


class PositionController(Ownable, PositionControllerLike):
    """
    Position NFT registry.

    Every token is tagged with the escrow it controls at mint time. That
    escrow may move and burn its own token, besides the token owner and
    approved operators.
    """

    def __init__(self, host, address: str) -> None:
        super().__init__(host, address)
        self.storage.update(
            next_id=1,
            owners={},
            escrows={},
            approvals={},
            balances={},
            burned=[],
        )

    # --------------------------------------------------
    # views
    # --------------------------------------------------
    @view
    def owner_of(self, token_id: int) -> str:
        owner = self.storage["owners"].get(token_id)
        if owner is None:
            raise TokenNotMinted(f"token {token_id}")
        return owner

    @view
    def exists(self, token_id: int) -> bool:
        return token_id in self.storage["owners"]

    @view
    def is_burned(self, token_id: int) -> bool:
        return token_id in self.storage["burned"]

    @view
    def escrow_of(self, token_id: int) -> str:
        return self.storage["escrows"].get(token_id, ZERO_ADDRESS)

    @view
    def balance_of(self, account: str) -> int:
        return self.storage["balances"].get(to_address(account), 0)

    @view
    def get_approved(self, token_id: int) -> str:
        return self.storage["approvals"].get(token_id, ZERO_ADDRESS)

    # --------------------------------------------------
    # mutators
    # --------------------------------------------------
    @external
    @only_owner
    def mint(self, to: str, escrow: str) -> int:
        to = to_address(to)
        if to == ZERO_ADDRESS:
            raise UnsafeRecipient("mint to zero address")

        token_id = self.storage["next_id"]
        self.storage["next_id"] = token_id + 1

        self.storage["owners"][token_id] = to
        self.storage["escrows"][token_id] = to_address(escrow)
        self._add_balance(to, 1)

        self.emit(Transfer(frm=ZERO_ADDRESS, to=to, token_id=token_id))
        return token_id

    @external
    def burn(self, token_id: int) -> None:
        owner = self.owner_of(token_id)
        sender = self.msg_sender
        if sender not in (owner, self.storage["owner"], self.escrow_of(token_id)):
            raise Unauthorized(f"burn token {token_id} by {sender}")

        del self.storage["owners"][token_id]
        self.storage["approvals"].pop(token_id, None)
        self.storage["burned"].append(token_id)
        self._add_balance(owner, -1)

        self.emit(Transfer(frm=owner, to=ZERO_ADDRESS, token_id=token_id))

    @external
    def approve(self, approved: str, token_id: int) -> None:
        owner = self.owner_of(token_id)
        if self.msg_sender != owner:
            raise Unauthorized(f"approve token {token_id} by {self.msg_sender}")

        approved = to_address(approved)
        self.storage["approvals"][token_id] = approved
        self.emit(Approval(owner=owner, approved=approved, token_id=token_id))

    @external
    def safe_transfer_from(self, frm: str, to: str, token_id: int, data: bytes = b"") -> None:
        frm, to = to_address(frm), to_address(to)
        owner = self.owner_of(token_id)
        if owner != frm:
            raise NotTokenOwner(f"token {token_id} is owned by {owner}, not {frm}")
        if to == ZERO_ADDRESS:
            raise UnsafeRecipient("transfer to zero address")

        sender = self.msg_sender
        if sender not in (owner, self.get_approved(token_id), self.escrow_of(token_id)):
            raise Unauthorized(f"transfer token {token_id} by {sender}")

        self.storage["owners"][token_id] = to
        self.storage["approvals"].pop(token_id, None)
        self._add_balance(frm, -1)
        self._add_balance(to, 1)
        self.emit(Transfer(frm=frm, to=to, token_id=token_id))

        if self.code_at(to):
            ret = self.call(to, "on_erc721_received", sender, frm, token_id, data)
            if ret != ERC721_RECEIVED:
                raise UnsafeRecipient(f"{to} did not accept token {token_id}")

    # --------------------------------------------------
    def _add_balance(self, account: str, delta: int) -> None:
        balances = self.storage["balances"]
        balances[account] = balances.get(account, 0) + delta

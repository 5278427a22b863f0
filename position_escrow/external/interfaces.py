from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class PositionControllerLike(ABC):
    """
    Call surface of the position-NFT controller consumed by the escrow
    subsystem. Owning a token means controlling its escrow.
    """

    @abstractmethod
    def mint(self, to: str, escrow: str) -> int:
        ...

    @abstractmethod
    def burn(self, token_id: int) -> None:
        ...

    @abstractmethod
    def owner_of(self, token_id: int) -> str:
        """Reverts for unminted or burned tokens."""

    @abstractmethod
    def safe_transfer_from(self, frm: str, to: str, token_id: int, data: bytes = b"") -> None:
        ...

    @abstractmethod
    def transfer_ownership(self, new_owner: str) -> None:
        ...


class RewardRouterLike(ABC):
    """
    Call surface of the external reward system.
    """

    @abstractmethod
    def signal_transfer(self, receiver: str) -> None:
        ...

    @abstractmethod
    def accept_transfer(self, sender: str) -> None:
        ...

    @abstractmethod
    def pending_receivers(self, account: str) -> str:
        """Zero address when nothing is pending."""

    @abstractmethod
    def handle_rewards(
        self,
        claim_primary: bool,
        stake_primary: bool,
        claim_secondary: bool,
        stake_secondary: bool,
        stake_bonus: bool,
        claim_yield: bool,
        convert_yield_to_native: bool,
    ) -> None:
        ...


class FungibleTokenLike(ABC):
    """
    Standard fungible-token calls. Return value is True, False or None
    depending on how conforming the implementation is.
    """

    @abstractmethod
    def transfer(self, to: str, amount: int) -> Optional[bool]:
        ...

    @abstractmethod
    def transfer_from(self, frm: str, to: str, amount: int) -> Optional[bool]:
        ...

    @abstractmethod
    def approve(self, spender: str, amount: int) -> Optional[bool]:
        ...

    @abstractmethod
    def balance_of(self, account: str) -> int:
        ...

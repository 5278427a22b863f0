"""
External collaborators.

The escrow subsystem consumes these only through the interfaces in
`interfaces.py`. The concrete classes are in-memory reference systems
for simulation and tests.
"""

from .interfaces import FungibleTokenLike, PositionControllerLike, RewardRouterLike
from .position_controller import (
    ERC721_RECEIVED,
    NotTokenOwner,
    PositionController,
    TokenNotMinted,
)
from .reward_router import NoPendingTransfer, RewardRouter, RouterPaused
from .token import FungibleToken, InsufficientAllowance, InsufficientTokenBalance

__all__ = [
    "FungibleTokenLike",
    "PositionControllerLike",
    "RewardRouterLike",
    "ERC721_RECEIVED",
    "NotTokenOwner",
    "PositionController",
    "TokenNotMinted",
    "NoPendingTransfer",
    "RewardRouter",
    "RouterPaused",
    "FungibleToken",
    "InsufficientAllowance",
    "InsufficientTokenBalance",
]

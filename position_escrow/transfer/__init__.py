from .safe_transfer import (
    approve_token,
    transfer_native,
    transfer_token,
    transfer_token_from,
)

__all__ = [
    "approve_token",
    "transfer_native",
    "transfer_token",
    "transfer_token_from",
]

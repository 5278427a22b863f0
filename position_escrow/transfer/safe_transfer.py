#!filepath: position_escrow/transfer/safe_transfer.py
"""
Best-effort value transfer helpers.

Token calls count as successful when they do not revert and return
either nothing or exactly True. These helpers do NOT check that `token`
has code; a call to an empty address returns nothing and therefore
"succeeds". Callers must check code themselves.
"""
from __future__ import annotations

from typing import Any, Type

from position_escrow.chain import CallResult, Contract
from position_escrow.utils.errors import (
    ApproveFailed,
    ExternalCallFailure,
    NativeTransferFailed,
    TransferFailed,
    TransferFromFailed,
)


def _returned_success(ret: Any) -> bool:
    # no return data, or a decoded boolean true
    return ret is None or ret is True


def _check(result: CallResult, error: Type[ExternalCallFailure], what: str) -> None:
    if not result.ok:
        raise error(f"{what}: {type(result.error).__name__}: {result.error}") from result.error
    if not _returned_success(result.value):
        raise error(f"{what}: returned {result.value!r}")


def transfer_native(caller: Contract, to: str, amount: int) -> None:
    result = caller.try_call(to, None, value=amount)
    if not result.ok:
        raise NativeTransferFailed(
            f"{amount} from {caller.address} to {to}: {type(result.error).__name__}: {result.error}"
        ) from result.error


def transfer_token(caller: Contract, token: str, to: str, amount: int) -> None:
    result = caller.try_call(token, "transfer", to, amount)
    _check(result, TransferFailed, f"transfer {amount} of {token} to {to}")


def transfer_token_from(caller: Contract, token: str, frm: str, to: str, amount: int) -> None:
    result = caller.try_call(token, "transfer_from", frm, to, amount)
    _check(result, TransferFromFailed, f"transfer_from {amount} of {token} {frm} -> {to}")


def approve_token(caller: Contract, token: str, spender: str, amount: int) -> None:
    result = caller.try_call(token, "approve", spender, amount)
    _check(result, ApproveFailed, f"approve {amount} of {token} for {spender}")

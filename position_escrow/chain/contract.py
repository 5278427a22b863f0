#!filepath: position_escrow/chain/contract.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from eth_utils import keccak

from position_escrow.chain.address import ZERO_ADDRESS
from position_escrow.chain.events import Event

if TYPE_CHECKING:
    from position_escrow.chain.host import CallResult, Host


# ----------------------------------------------------------------------
# Entry-point markers
# ----------------------------------------------------------------------
def external(fn: Optional[Callable] = None, *, payable: bool = False):
    """
    Marks a method as callable through Host.call / Host.transact.

        @external
        def claim(self): ...

        @external(payable=True)
        def deploy(self, salt, payload): ...
    """

    def mark(f: Callable) -> Callable:
        f.__entrypoint__ = "external"
        f.__payable__ = payable
        return f

    if fn is not None:
        return mark(fn)
    return mark


def view(fn: Callable) -> Callable:
    """Read-only entry point. Never accepts value."""
    fn.__entrypoint__ = "view"
    fn.__payable__ = False
    return fn


# ----------------------------------------------------------------------
# InitCode
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class InitCode:
    """
    Creation payload: which runtime to instantiate and with what
    constructor arguments. `bytecode` is the content create2 hashes.
    """

    runtime: type
    args: tuple = ()
    bytecode: bytes = b""

    @classmethod
    def of(cls, runtime: type, *args: Any) -> "InitCode":
        return cls(
            runtime=runtime,
            args=tuple(args),
            bytecode=runtime.runtime_code() + repr(tuple(args)).encode("utf-8"),
        )


# ----------------------------------------------------------------------
# Contract
# ----------------------------------------------------------------------
class Contract:
    """
    Base class of every runtime that lives at an address on the Host.

    Subclasses keep constructor arguments as plain attributes (they are
    immutable) and everything mutable in `self.storage`.
    """

    # None → derived from the class path; b"" → creation leaves no code
    RUNTIME_CODE: Optional[bytes] = None

    def __init__(self, host: "Host", address: str) -> None:
        self.host = host
        self.address = address

    @classmethod
    def runtime_code(cls) -> bytes:
        if cls.RUNTIME_CODE is not None:
            return cls.RUNTIME_CODE
        return keccak(text=f"{cls.__module__}.{cls.__qualname__}")

    # --------------------------------------------------
    # execution context
    # --------------------------------------------------
    @property
    def storage(self) -> Dict[str, Any]:
        return self.host.state.storage.setdefault(self.address, {})

    @property
    def msg_sender(self) -> str:
        frame = self.host.frame
        return frame.sender if frame is not None else ZERO_ADDRESS

    @property
    def msg_value(self) -> int:
        frame = self.host.frame
        return frame.value if frame is not None else 0

    @property
    def balance(self) -> int:
        return self.host.balance_of(self.address)

    def code_at(self, address: str) -> bytes:
        return self.host.code_at(address)

    # --------------------------------------------------
    # outgoing calls (sender = this contract)
    # --------------------------------------------------
    def call(self, to: str, method: Optional[str] = None, *args, value: int = 0, **kwargs):
        return self.host.call(self.address, to, method, *args, value=value, **kwargs)

    def try_call(
        self, to: str, method: Optional[str] = None, *args, value: int = 0, **kwargs
    ) -> "CallResult":
        return self.host.try_call(self.address, to, method, *args, value=value, **kwargs)

    def emit(self, event: Event) -> None:
        self.host.emit(self.address, event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"

#!filepath: position_escrow/chain/host.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Type

from eth_utils import keccak

from position_escrow.chain.address import (
    AddressLike,
    create2_address,
    create_address,
    to_address,
)
from position_escrow.chain.contract import Contract, InitCode
from position_escrow.chain.events import ContractCreated, Event, Log
from position_escrow.chain.state import WorldState
from position_escrow.utils.errors import (
    DeploymentFailed,
    InsufficientBalance,
    Revert,
    UnknownMethod,
    ValueRejected,
)
from position_escrow.utils.logger import logs


@dataclass(frozen=True)
class Frame:
    sender: str
    address: str
    value: int


@dataclass(frozen=True)
class CallResult:
    """
    Outcome of Host.try_call. Only a Revert is captured here; any other
    exception still propagates out of try_call.
    """
    ok: bool
    value: Any = None
    error: Optional[Revert] = None


class Host:
    """
    Serialized in-memory execution host (FINAL / FROZEN)

    Invariants:
    - Exactly one call runs at a time; frames form a strict stack.
    - Every frame is atomic: if it raises, the world is restored to the
      state it had when the frame was entered.
    - Addresses are checksummed strings everywhere.

    Host explicitly does NOT:
    - meter gas
    - schedule or retry anything
    """

    def __init__(self) -> None:
        self.state = WorldState()
        self._frames: List[Frame] = []

    # ---------------------------------------------------------
    # accounts
    # ---------------------------------------------------------
    def balance_of(self, address: AddressLike) -> int:
        return self.state.balances.get(to_address(address), 0)

    def nonce_of(self, address: AddressLike) -> int:
        return self.state.nonces.get(to_address(address), 0)

    def code_at(self, address: AddressLike) -> bytes:
        return self.state.code.get(to_address(address), b"")

    def contract_at(self, address: AddressLike) -> Optional[Contract]:
        return self.state.contracts.get(to_address(address))

    def fund(self, address: AddressLike, amount: int) -> None:
        """Faucet: credit native value out of thin air."""
        if amount < 0:
            raise ValueError(f"negative amount: {amount}")
        address = to_address(address)
        self.state.balances[address] = self.state.balances.get(address, 0) + amount

    # ---------------------------------------------------------
    # event log
    # ---------------------------------------------------------
    def emit(self, address: str, event: Event) -> None:
        self.state.logs.append(Log(address=address, event=event))

    def events(
        self,
        kind: Optional[Type[Event]] = None,
        address: Optional[AddressLike] = None,
    ) -> List[Event]:
        address = to_address(address) if address is not None else None
        return [
            log.event
            for log in self.state.logs
            if (kind is None or isinstance(log.event, kind))
            and (address is None or log.address == address)
        ]

    # ---------------------------------------------------------
    # frames
    # ---------------------------------------------------------
    @property
    def frame(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    @property
    def depth(self) -> int:
        return len(self._frames)

    # ---------------------------------------------------------
    # calls
    # ---------------------------------------------------------
    def transact(self, sender: AddressLike, to: AddressLike, method: Optional[str] = None, *args, value: int = 0, **kwargs):
        """
        Top-level call signed by an external account.
        """
        if self._frames:
            raise RuntimeError("transact() must not be nested inside a running call")

        sender = to_address(sender)
        # the sender nonce is consumed whether or not the call succeeds
        self.state.nonces[sender] = self.state.nonces.get(sender, 0) + 1

        try:
            return self.call(sender, to, method, *args, value=value, **kwargs)
        except Revert as e:
            logs.debug(f"[host] tx reverted {sender} -> {to}.{method}: {type(e).__name__}: {e}")
            raise

    def call(self, sender: AddressLike, to: AddressLike, method: Optional[str] = None, *args, value: int = 0, **kwargs):
        """
        Message call. `method=None` is a plain value transfer and hits the
        target's receive() hook when the target is a contract.
        """
        sender = to_address(sender)
        to = to_address(to)

        snap = self.state.snapshot()
        self._frames.append(Frame(sender=sender, address=to, value=value))
        try:
            self._move_value(sender, to, value)
            return self._dispatch(to, method, value, args, kwargs)
        except Exception:
            self.state.restore(snap)
            raise
        finally:
            self._frames.pop()

    def try_call(self, sender: AddressLike, to: AddressLike, method: Optional[str] = None, *args, value: int = 0, **kwargs) -> CallResult:
        try:
            result = self.call(sender, to, method, *args, value=value, **kwargs)
        except Revert as e:
            return CallResult(ok=False, error=e)
        return CallResult(ok=True, value=result)

    def _move_value(self, sender: str, to: str, value: int) -> None:
        if value < 0:
            raise ValueError(f"negative value: {value}")
        if value == 0:
            return

        balance = self.state.balances.get(sender, 0)
        if balance < value:
            raise InsufficientBalance(f"{sender} has {balance}, needs {value}")

        self.state.balances[sender] = balance - value
        self.state.balances[to] = self.state.balances.get(to, 0) + value

    def _dispatch(self, to: str, method: Optional[str], value: int, args: tuple, kwargs: dict):
        contract = self.state.contracts.get(to)

        # no code: succeeds with no return data
        if contract is None:
            return None

        if method is None:
            hook = getattr(contract, "receive", None)
            if hook is None:
                raise ValueRejected(f"{type(contract).__name__} at {to} cannot receive value")
            return hook()

        fn = getattr(contract, method, None) if not method.startswith("_") else None
        kind = getattr(fn, "__entrypoint__", None)
        if kind is None:
            raise UnknownMethod(f"{type(contract).__name__}.{method}")

        if value and not getattr(fn, "__payable__", False):
            raise ValueRejected(f"{type(contract).__name__}.{method} is not payable")

        return fn(*args, **kwargs)

    # ---------------------------------------------------------
    # contract creation
    # ---------------------------------------------------------
    def create(self, sender: AddressLike, init: InitCode, value: int = 0) -> Optional[str]:
        """
        Nonce-addressed creation. Returns None when creation fails.
        """
        sender = to_address(sender)
        nonce = self.state.nonces.get(sender, 0)
        self.state.nonces[sender] = nonce + 1

        return self._create_at(sender, create_address(sender, nonce), init, value)

    def create2(self, sender: AddressLike, salt: bytes, init: InitCode, value: int = 0) -> Optional[str]:
        """
        Content-addressed creation. Returns None when creation fails.
        """
        sender = to_address(sender)
        address = create2_address(sender, salt, keccak(init.bytecode))
        return self._create_at(sender, address, init, value)

    def _create_at(self, sender: str, address: str, init: InitCode, value: int) -> Optional[str]:
        if not self.state.is_empty(address):
            logs.debug(f"[host] create collision at {address}")
            return None

        snap = self.state.snapshot()
        self._frames.append(Frame(sender=sender, address=address, value=value))
        try:
            self._move_value(sender, address, value)
            self.state.nonces[address] = 1

            instance = init.runtime(self, address, *init.args)

            code = init.runtime.runtime_code()
            if code:
                self.state.code[address] = code
                self.state.contracts[address] = instance
        except Revert as e:
            self.state.restore(snap)
            logs.debug(f"[host] create {init.runtime.__name__} reverted: {type(e).__name__}: {e}")
            return None
        except Exception:
            self.state.restore(snap)
            raise
        finally:
            self._frames.pop()

        self.emit(address, ContractCreated(creator=sender, address=address, runtime=init.runtime.__name__))
        return address

    def deploy(self, sender: AddressLike, runtime: type, *args, value: int = 0) -> Contract:
        """
        Top-level creation from an external account; returns the instance.
        """
        if self._frames:
            raise RuntimeError("deploy() must not be nested inside a running call")

        address = self.create(sender, InitCode.of(runtime, *args), value=value)
        if address is None or address not in self.state.contracts:
            raise DeploymentFailed(f"{runtime.__name__} from {sender}")

        logs.info(f"[host] deployed {runtime.__name__} at {address}")
        return self.state.contracts[address]

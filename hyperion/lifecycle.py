"""
Contract lifecycle building blocks.

Ownership, pausing, one-shot initialization and the re-entrancy guard used by
both the bridge and the tokens it deploys. Modifiers are decorators; storage
slots are class-level defaults so that an untouched slot reads as zero, the
same way an unwritten EVM storage slot does.
"""

import functools
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from .constants import OWNERSHIP_EXPIRY_DURATION, ZERO_ADDRESS
from .crypto.address import is_zero_address, normalize_address
from .evm.contract import Contract
from .evm.events import Event
from .exceptions import (
    AuthorizationError,
    InvalidValueError,
    LifecycleError,
    ReentrancyError,
)
from .logger import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class OwnershipTransferred(Event):
    SIGNATURE = "OwnershipTransferred(address,address)"
    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class Paused(Event):
    SIGNATURE = "Paused(address)"
    account: str


@dataclass(frozen=True)
class Unpaused(Event):
    SIGNATURE = "Unpaused(address)"
    account: str


# ══════════════════════════════════════════════════════════════════════
#  INITIALIZABLE
# ══════════════════════════════════════════════════════════════════════

class Initializable(Contract):
    """
    One-shot initialization.

    The initializer runs once, either as its own transaction after
    deployment or from inside the constructor. While the constructor runs
    the address has no code yet, so a second, nested initializer call from
    a constructor is tolerated as well.
    """

    _initialized: bool = False
    _initializing: bool = False


def initializer(fn: F) -> F:
    @functools.wraps(fn)
    def wrapper(self: Initializable, *args, **kwargs):
        top_level = not self._initializing
        constructing = self.chain.is_constructing(self.address)
        if not ((top_level and not self._initialized) or (constructing and self._initialized)):
            raise LifecycleError("Initializable: contract is already initialized")

        self._initialized = True
        if top_level:
            self._initializing = True
        try:
            return fn(self, *args, **kwargs)
        finally:
            if top_level:
                self._initializing = False
    return wrapper  # type: ignore[return-value]


# ══════════════════════════════════════════════════════════════════════
#  OWNABLE
# ══════════════════════════════════════════════════════════════════════

class Ownable(Contract):
    """Single owner with transfer and renounce."""

    _owner: str = ZERO_ADDRESS

    def owner(self) -> str:
        return self._owner

    def _check_owner(self) -> None:
        if self._owner != self.msg_sender:
            raise AuthorizationError("Ownable: caller is not the owner")

    def _transfer_ownership(self, new_owner: str) -> None:
        old_owner = self._owner
        self._owner = new_owner
        self.emit(OwnershipTransferred(previous_owner=old_owner, new_owner=new_owner))
        logger.info(f"{type(self).__name__} {self.address} owner {old_owner} -> {new_owner}")

    def transfer_ownership(self, new_owner: str) -> None:
        self._check_owner()
        new_owner = normalize_address(new_owner)
        if is_zero_address(new_owner):
            raise InvalidValueError("Ownable: new owner is the zero address")
        self._transfer_ownership(new_owner)

    def renounce_ownership(self) -> None:
        self._check_owner()
        self._transfer_ownership(ZERO_ADDRESS)


def only_owner(fn: F) -> F:
    @functools.wraps(fn)
    def wrapper(self: Ownable, *args, **kwargs):
        self._check_owner()
        return fn(self, *args, **kwargs)
    return wrapper  # type: ignore[return-value]


class ExpiringOwnable(Ownable):
    """
    Ownership with a bounded lifetime.

    Privileges granted by ``only_owner_before_expiry`` lapse at the expiry
    timestamp; after it anyone may finalize the renunciation.
    """

    _ownership_expiry: int = 0

    def _start_ownership_window(self) -> None:
        self._ownership_expiry = self.block_timestamp + OWNERSHIP_EXPIRY_DURATION

    def get_ownership_expiry_timestamp(self) -> int:
        return self._ownership_expiry

    def is_ownership_expired(self) -> bool:
        return self.block_timestamp > self._ownership_expiry

    def renounce_ownership_after_expiry(self) -> None:
        if not self.is_ownership_expired():
            raise LifecycleError("Ownable: ownership not yet expired")
        if is_zero_address(self._owner):
            raise AuthorizationError("Ownable: ownership already renounced")
        self._transfer_ownership(ZERO_ADDRESS)


def only_owner_before_expiry(fn: F) -> F:
    @functools.wraps(fn)
    def wrapper(self: ExpiringOwnable, *args, **kwargs):
        self._check_owner()
        if self.is_ownership_expired():
            raise AuthorizationError("Ownable: ownership expired")
        return fn(self, *args, **kwargs)
    return wrapper  # type: ignore[return-value]


# ══════════════════════════════════════════════════════════════════════
#  PAUSABLE
# ══════════════════════════════════════════════════════════════════════

class Pausable(Contract):

    _paused: bool = False

    def paused(self) -> bool:
        return self._paused

    def _require_not_paused(self) -> None:
        if self._paused:
            raise LifecycleError("Pausable: paused")

    def _require_paused(self) -> None:
        if not self._paused:
            raise LifecycleError("Pausable: not paused")

    def _pause(self) -> None:
        self._require_not_paused()
        self._paused = True
        self.emit(Paused(account=self.msg_sender))
        logger.warning(f"{type(self).__name__} {self.address} paused by {self.msg_sender}")

    def _unpause(self) -> None:
        self._require_paused()
        self._paused = False
        self.emit(Unpaused(account=self.msg_sender))
        logger.info(f"{type(self).__name__} {self.address} unpaused by {self.msg_sender}")


def when_not_paused(fn: F) -> F:
    @functools.wraps(fn)
    def wrapper(self: Pausable, *args, **kwargs):
        self._require_not_paused()
        return fn(self, *args, **kwargs)
    return wrapper  # type: ignore[return-value]


# ══════════════════════════════════════════════════════════════════════
#  REENTRANCY GUARD
# ══════════════════════════════════════════════════════════════════════

class ReentrancyGuard(Contract):

    _entered: bool = False


def non_reentrant(fn: F) -> F:
    @functools.wraps(fn)
    def wrapper(self: ReentrancyGuard, *args, **kwargs):
        if self._entered:
            raise ReentrancyError("ReentrancyGuard: reentrant call")
        self._entered = True
        try:
            return fn(self, *args, **kwargs)
        finally:
            self._entered = False
    return wrapper  # type: ignore[return-value]

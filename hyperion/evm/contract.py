"""
Contract base class.

A contract is a plain Python object bound to a Chain and an address. All of
its attributes except the chain binding are persistent storage and take part
in snapshots. Contracts never hold references to each other: they keep
addresses and reach other contracts through ``self.call`` so that
``msg_sender`` is set correctly and reverts unwind across the whole call.
"""

from typing import TYPE_CHECKING, Any, ClassVar, Dict, Tuple

from ..constants import MAX_UINT256
from ..exceptions import Revert

if TYPE_CHECKING:
    from .chain import Chain
    from .events import Event


class Contract:
    """Base for every contract living on a simulated Chain."""

    # Attributes excluded from snapshots
    VOLATILE: ClassVar[Tuple[str, ...]] = ('chain',)

    def __init__(self, chain: "Chain", address: str):
        self.chain = chain
        self.address = address

    # ── execution context ───────────────────────────────────────────────

    @property
    def msg_sender(self) -> str:
        return self.chain.msg_sender

    @property
    def block_number(self) -> int:
        return self.chain.block_number

    @property
    def block_timestamp(self) -> int:
        return self.chain.timestamp

    def emit(self, event: "Event") -> None:
        self.chain.emit(self.address, event)

    def call(self, target: str, method: str, *args: Any) -> Any:
        """Message-call *method* on the contract at *target*."""
        return self.chain.call(self.address, target, method, *args)

    # ── storage ─────────────────────────────────────────────────────────

    def persistent_state(self) -> Dict[str, Any]:
        return {k: v for k, v in vars(self).items() if k not in self.VOLATILE}

    def restore_state(self, state: Dict[str, Any]) -> None:
        volatile = {k: getattr(self, k) for k in self.VOLATILE if hasattr(self, k)}
        self.__dict__.clear()
        self.__dict__.update(state)
        self.__dict__.update(volatile)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"


def check_uint256(value: int, label: str = "value") -> int:
    """Reject values an ABI decoder would not accept as uint256."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise Revert(f"{label} must be an integer")
    if value < 0 or value > MAX_UINT256:
        raise Revert(f"{label} out of uint256 range")
    return value

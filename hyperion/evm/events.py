"""
Contract events, logs and receipts.

Every event is a frozen dataclass whose ``SIGNATURE`` is the canonical
event signature; its topic0 is keccak256 of that signature, so
off-chain consumers can match logs exactly as they would on Ethereum.
"""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Optional, Type, TypeVar

from ..crypto.encoding import compute_event_topic

E = TypeVar("E", bound="Event")


def _jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return '0x' + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class Event:
    """Base class for all emitted events."""

    SIGNATURE: ClassVar[str] = ""

    @classmethod
    def event_name(cls) -> str:
        return cls.SIGNATURE.split("(", 1)[0]

    @classmethod
    def topic(cls) -> bytes:
        return compute_event_topic(cls.SIGNATURE)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"event": self.event_name()}
        for f in fields(self):
            result[f.name] = _jsonable(getattr(self, f.name))
        return result


@dataclass(frozen=True)
class Log:
    """A committed event together with its emitter and position."""
    address: str
    event: Event
    block_number: int
    tx_index: int
    log_index: int

    @property
    def topic(self) -> bytes:
        return type(self.event).topic()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "blockNumber": self.block_number,
            "transactionIndex": self.tx_index,
            "logIndex": self.log_index,
            "topic0": '0x' + self.topic.hex(),
            **self.event.to_dict(),
        }


@dataclass
class Receipt:
    """Outcome of a successful transaction."""
    tx_index: int
    block_number: int
    sender: str
    return_value: Any = None
    logs: List[Log] = field(default_factory=list)
    status: int = 1

    def events(self, event_type: Optional[Type[E]] = None) -> List[E]:
        """Events emitted by this transaction, optionally filtered by type."""
        return [
            log.event for log in self.logs
            if event_type is None or isinstance(log.event, event_type)
        ]

    def event(self, event_type: Type[E]) -> E:
        """The single event of *event_type*; raises LookupError otherwise."""
        matches = self.events(event_type)
        if len(matches) != 1:
            raise LookupError(
                f"Expected exactly one {event_type.__name__}, found {len(matches)}"
            )
        return matches[0]

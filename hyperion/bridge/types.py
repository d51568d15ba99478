"""
Bridge types: validator set arguments and bridge events.

Event field order follows the on-chain event declarations; the SIGNATURE of each
event is what its topic0 is computed from.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from ..constants import ZERO_ADDRESS
from ..crypto.address import normalize_address
from ..evm.events import Event
from ..lifecycle import OwnershipTransferred, Paused, Unpaused


# ══════════════════════════════════════════════════════════════════════
#  VALIDATOR SET
# ══════════════════════════════════════════════════════════════════════

@dataclass
class ValsetArgs:
    """
    A validator set as presented in a call.

    Only its checkpoint is ever stored. Order matters: index *i* of
    ``validators`` and ``powers`` is index *i* of the signature arrays.
    """
    validators: List[str] = field(default_factory=list)
    powers: List[int] = field(default_factory=list)
    valset_nonce: int = 0
    reward_amount: int = 0
    reward_token: str = ZERO_ADDRESS

    def __post_init__(self):
        self.validators = [normalize_address(v) for v in self.validators]
        self.powers = list(self.powers)
        self.reward_token = normalize_address(self.reward_token)

    def is_well_formed(self) -> bool:
        return len(self.validators) == len(self.powers)

    def total_power(self) -> int:
        return sum(self.powers)

    def to_abi_tuple(self) -> Tuple[List[str], List[int], int, int, str]:
        """(validators, powers, valsetNonce, rewardAmount, rewardToken) as the ABI struct."""
        return (
            list(self.validators),
            list(self.powers),
            self.valset_nonce,
            self.reward_amount,
            self.reward_token,
        )

    @classmethod
    def from_abi_tuple(cls, value: Sequence[Any]) -> "ValsetArgs":
        validators, powers, nonce, reward_amount, reward_token = value
        return cls(list(validators), list(powers), nonce, reward_amount, reward_token)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "validators": list(self.validators),
            "powers": list(self.powers),
            "valsetNonce": self.valset_nonce,
            "rewardAmount": self.reward_amount,
            "rewardToken": self.reward_token,
        }


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValsetUpdatedEvent(Event):
    """Emitted when a new validator set is committed (and once at initialize)."""
    SIGNATURE = "ValsetUpdatedEvent(uint256,uint256,uint256,address,address[],uint256[])"
    new_valset_nonce: int
    event_nonce: int
    reward_amount: int
    reward_token: str
    validators: Tuple[str, ...]
    powers: Tuple[int, ...]

    def to_valset(self) -> ValsetArgs:
        """The committed set, recovered from the event history."""
        return ValsetArgs(
            validators=list(self.validators),
            powers=list(self.powers),
            valset_nonce=self.new_valset_nonce,
            reward_amount=self.reward_amount,
            reward_token=self.reward_token,
        )


@dataclass(frozen=True)
class SendToHeliosEvent(Event):
    SIGNATURE = "SendToHeliosEvent(address,address,bytes32,uint256,uint256,string)"
    token_contract: str
    sender: str
    destination: bytes
    amount: int
    event_nonce: int
    data: str


@dataclass(frozen=True)
class SendToCosmosEvent(Event):
    """Legacy outbound event kept for older off-chain consumers."""
    SIGNATURE = "SendToCosmosEvent(address,address,bytes32,uint256,uint256)"
    token_contract: str
    sender: str
    destination: bytes
    amount: int
    event_nonce: int


@dataclass(frozen=True)
class TransactionBatchExecutedEvent(Event):
    SIGNATURE = "TransactionBatchExecutedEvent(uint256,address,uint256)"
    batch_nonce: int
    token: str
    event_nonce: int


@dataclass(frozen=True)
class ERC20DeployedEvent(Event):
    """
    A token became known to the bridge.

    Emitted by the factory for Helios-native tokens, and on the first deposit
    of a foreign token so Helios can register the counterparty denom. In the
    latter case ``cosmos_denom`` is empty.
    """
    SIGNATURE = "ERC20DeployedEvent(string,address,string,string,uint8,uint256)"
    cosmos_denom: str
    token_contract: str
    name: str
    symbol: str
    decimals: int
    event_nonce: int


__all__ = [
    "ValsetArgs",
    "ValsetUpdatedEvent",
    "SendToHeliosEvent",
    "SendToCosmosEvent",
    "TransactionBatchExecutedEvent",
    "ERC20DeployedEvent",
    "OwnershipTransferred",
    "Paused",
    "Unpaused",
]

"""
Helios-side records the relayer works from.

Validator sets, outgoing batches and the confirmations validators post for
them, as the Helios hyperion module exposes them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..constants import ZERO_ADDRESS
from ..crypto.address import to_checksum_address
from ..bridge.types import ValsetArgs


@dataclass
class BridgeValidator:
    """A validator's bridge power and Ethereum signing address."""
    power: int
    ethereum_address: str

    def __post_init__(self):
        self.ethereum_address = to_checksum_address(self.ethereum_address)


@dataclass
class Valset:
    """A validator set snapshot produced by Helios."""
    nonce: int
    members: List[BridgeValidator] = field(default_factory=list)
    reward_amount: int = 0
    reward_token: str = ZERO_ADDRESS
    height: int = 0

    def validators_and_powers(self) -> Tuple[List[str], List[int]]:
        return (
            [m.ethereum_address for m in self.members],
            [m.power for m in self.members],
        )

    def total_power(self) -> int:
        return sum(m.power for m in self.members)

    def to_valset_args(self) -> ValsetArgs:
        validators, powers = self.validators_and_powers()
        return ValsetArgs(
            validators=validators,
            powers=powers,
            valset_nonce=self.nonce,
            reward_amount=self.reward_amount,
            reward_token=self.reward_token,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Valset":
        return cls(
            nonce=int(data["nonce"]),
            members=[
                BridgeValidator(int(m["power"]), m["ethereum_address"])
                for m in data.get("members", [])
            ],
            reward_amount=int(data.get("reward_amount", 0)),
            reward_token=data.get("reward_token") or ZERO_ADDRESS,
            height=int(data.get("height", 0)),
        )


@dataclass
class OutgoingTransferTx:
    id: int
    sender: str
    dest_address: str
    amount: int
    fee: int = 0


@dataclass
class OutgoingTxBatch:
    """A batch of withdrawals for one token, waiting to be relayed."""
    batch_nonce: int
    batch_timeout: int
    token_contract: str
    transactions: List[OutgoingTransferTx] = field(default_factory=list)
    block: int = 0

    def checkpoint_values(self) -> Tuple[List[int], List[str], List[int]]:
        """(amounts, destinations, fees) in transaction order."""
        amounts = [tx.amount for tx in self.transactions]
        destinations = [to_checksum_address(tx.dest_address) for tx in self.transactions]
        fees = [tx.fee for tx in self.transactions]
        return amounts, destinations, fees


@dataclass
class ValsetConfirm:
    """A validator's signature over a valset checkpoint."""
    nonce: int
    eth_address: str
    signature: str
    orchestrator: str = ""


@dataclass
class BatchConfirm:
    """A validator's signature over a batch digest."""
    nonce: int
    token_contract: str
    eth_signer: str
    signature: str
    orchestrator: str = ""

"""
Relayer: turn Helios confirmations into contract calls.

Confirmations arrive as a loose list of (signer, signature) pairs. The
contract wants parallel v/r/s arrays in validator order, with the zero
sentinel at every index that did not sign. Before paying gas for a call
that would revert, the relayer also checks that the signed share of the
set's power is at least RELAYER_MIN_POWER_PERCENT.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple, Union

from eth_utils import decode_hex

from ..bridge.abi import encode_call, transact_calldata
from ..bridge.types import ValsetArgs
from ..constants import RELAYER_MIN_POWER_PERCENT, TOTAL_HYPERION_POWER, ZERO_BYTES32
from ..crypto.address import to_checksum_address
from ..evm.chain import Chain
from ..evm.contract import Contract
from ..evm.events import Receipt
from ..exceptions import RelayerError
from ..logger import get_logger
from .models import BatchConfirm, OutgoingTxBatch, Valset, ValsetConfirm

logger = get_logger(__name__)


def sig_to_vrs(signature: Union[str, bytes]) -> Tuple[int, bytes, bytes]:
    """
    Split a 65-byte r‖s‖v signature into (v, r, s).

    A recovery id of 0/1 is normalized to 27/28, the form ecrecover takes.
    """
    raw = decode_hex(signature) if isinstance(signature, str) else bytes(signature)
    if len(raw) != 65:
        raise RelayerError(f"Signature must be 65 bytes, got {len(raw)}")
    v = raw[64]
    if v in (0, 1):
        v += 27
    return v, raw[0:32], raw[32:64]


def hyperion_power_to_percent(power: int, total: int = TOTAL_HYPERION_POWER) -> float:
    """Share of *total* that *power* represents, in percent."""
    if total <= 0:
        return 0.0
    return float(Decimal(power) / Decimal(total) * 100)


@dataclass
class RepackedSignatures:
    """Signature arrays aligned with a validator set."""
    validators: List[str] = field(default_factory=list)
    powers: List[int] = field(default_factory=list)
    v: List[int] = field(default_factory=list)
    r: List[bytes] = field(default_factory=list)
    s: List[bytes] = field(default_factory=list)
    signed_power: int = 0


def _repack(valset: Valset, signer_to_sig: Dict[str, str], kind: str) -> RepackedSignatures:
    """
    The power check measures the signed share of this set's own total power,
    not of TOTAL_HYPERION_POWER, so sets whose powers are not normalized
    to u32 max are judged correctly.
    """
    if not signer_to_sig:
        raise RelayerError(f"no signatures in {kind} confirmation")

    packed = RepackedSignatures()
    for member in valset.members:
        packed.validators.append(member.ethereum_address)
        packed.powers.append(member.power)
        signature = signer_to_sig.get(member.ethereum_address)
        if signature is None:
            packed.v.append(0)
            packed.r.append(ZERO_BYTES32)
            packed.s.append(ZERO_BYTES32)
            continue
        v, r, s = sig_to_vrs(signature)
        packed.v.append(v)
        packed.r.append(r)
        packed.s.append(s)
        packed.signed_power += member.power

    # A single-member set is its own quorum
    if len(packed.validators) == 1:
        return packed

    percent = hyperion_power_to_percent(packed.signed_power, valset.total_power())
    if percent < RELAYER_MIN_POWER_PERCENT:
        raise RelayerError(f"insufficient voting power power={percent:f}")
    return packed


def check_valset_sigs_and_repack(valset: Valset, confirms: Sequence[ValsetConfirm]) -> RepackedSignatures:
    """Align valset confirmations with *valset* (the set that signs)."""
    return _repack(
        valset,
        {to_checksum_address(c.eth_address): c.signature for c in confirms},
        "valset",
    )


def check_batch_sigs_and_repack(valset: Valset, confirms: Sequence[BatchConfirm]) -> RepackedSignatures:
    """Align batch confirmations with the current *valset*."""
    return _repack(
        valset,
        {to_checksum_address(c.eth_signer): c.signature for c in confirms},
        "batch",
    )


# ══════════════════════════════════════════════════════════════════════
#  CALL PREPARATION
# ══════════════════════════════════════════════════════════════════════

@dataclass
class ValsetUpdateCall:
    """Arguments of ``updateValset``."""
    new_valset: ValsetArgs
    current_valset: ValsetArgs
    v: List[int]
    r: List[bytes]
    s: List[bytes]

    def args(self) -> tuple:
        return (self.new_valset, self.current_valset, self.v, self.r, self.s)

    @property
    def calldata(self) -> bytes:
        return encode_call("updateValset", *self.args())


@dataclass
class SubmitBatchCall:
    """Arguments of ``submitBatch``."""
    current_valset: ValsetArgs
    v: List[int]
    r: List[bytes]
    s: List[bytes]
    amounts: List[int]
    destinations: List[str]
    fees: List[int]
    batch_nonce: int
    token_contract: str
    batch_timeout: int

    def args(self) -> tuple:
        return (
            self.current_valset, self.v, self.r, self.s,
            self.amounts, self.destinations, self.fees,
            self.batch_nonce, self.token_contract, self.batch_timeout,
        )

    @property
    def calldata(self) -> bytes:
        return encode_call("submitBatch", *self.args())


def prepare_valset_update(
    old_valset: Valset,
    new_valset: Valset,
    confirms: Sequence[ValsetConfirm],
) -> ValsetUpdateCall:
    """
    Build the ``updateValset`` call moving the contract from *old_valset*
    to *new_valset*. Signatures must come from the members of *old_valset*,
    since that is the set the contract currently trusts.
    """
    if new_valset.nonce <= old_valset.nonce:
        raise RelayerError("new valset nonce should be greater than old valset nonce")

    logger.info(
        f"Preparing valset update valset_nonce={new_valset.nonce} "
        f"validators={len(new_valset.members)} confirmations={len(confirms)}"
    )
    packed = check_valset_sigs_and_repack(old_valset, confirms)
    return ValsetUpdateCall(
        new_valset=new_valset.to_valset_args(),
        current_valset=old_valset.to_valset_args(),
        v=packed.v,
        r=packed.r,
        s=packed.s,
    )


def prepare_transaction_batch(
    current_valset: Valset,
    batch: OutgoingTxBatch,
    confirms: Sequence[BatchConfirm],
) -> SubmitBatchCall:
    """Build the ``submitBatch`` call for *batch* signed by *current_valset*."""
    packed = check_batch_sigs_and_repack(current_valset, confirms)
    amounts, destinations, fees = batch.checkpoint_values()
    logger.info(
        f"Preparing batch batch_nonce={batch.batch_nonce} token={batch.token_contract} "
        f"txs={len(amounts)} confirmations={len(confirms)}"
    )
    return SubmitBatchCall(
        current_valset=current_valset.to_valset_args(),
        v=packed.v,
        r=packed.r,
        s=packed.s,
        amounts=amounts,
        destinations=destinations,
        fees=fees,
        batch_nonce=batch.batch_nonce,
        token_contract=to_checksum_address(batch.token_contract),
        batch_timeout=batch.batch_timeout,
    )


def relay(
    chain: Chain,
    relayer: str,
    bridge: Contract,
    call: Union[ValsetUpdateCall, SubmitBatchCall],
) -> Receipt:
    """Submit a prepared call to *bridge* as raw calldata from *relayer*."""
    receipt = transact_calldata(chain, relayer, bridge, call.calldata)
    logger.info(f"Relayed {type(call).__name__} from {relayer} in tx {receipt.tx_index}")
    return receipt

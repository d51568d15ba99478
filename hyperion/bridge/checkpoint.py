"""
Checkpoint engine.

Canonical digests of validator sets and transaction batches, and the
weighted signature check that authorizes both. These functions are pure:
the same inputs give the same digest whether called by a contract, a
relayer or a test.
"""

from typing import Sequence, Union

from eth_utils import decode_hex

from ..constants import CHECKPOINT_METHOD_NAME, TRANSACTION_BATCH_METHOD_NAME
from ..crypto.encoding import bytes32_tag, hash_abi
from ..crypto.hashing import eth_signed_message_hash
from ..crypto.signing import ecrecover
from ..exceptions import (
    ConsistencyError,
    InsufficientPowerError,
    InvalidSignatureError,
    InvalidValueError,
)
from .types import ValsetArgs

# bytes32 method tags that domain-separate the two digest kinds
CHECKPOINT_TAG = bytes32_tag(CHECKPOINT_METHOD_NAME)
TRANSACTION_BATCH_TAG = bytes32_tag(TRANSACTION_BATCH_METHOD_NAME)

CHECKPOINT_TYPES = (
    'bytes32',    # hyperionId
    'bytes32',    # "checkpoint"
    'uint256',    # valsetNonce
    'address[]',  # validators
    'uint256[]',  # powers
    'uint256',    # rewardAmount
    'address',    # rewardToken
)

BATCH_TYPES = (
    'bytes32',    # hyperionId
    'bytes32',    # "transactionBatch"
    'uint256[]',  # amounts
    'address[]',  # destinations
    'uint256[]',  # fees
    'uint256',    # batchNonce
    'address',    # tokenContract
    'uint256',    # batchTimeout
)


def to_bytes32(value: Union[bytes, str], label: str = "value") -> bytes:
    """Accept raw bytes or a 0x-hex string; require exactly 32 bytes."""
    raw = decode_hex(value) if isinstance(value, str) else bytes(value)
    if len(raw) != 32:
        raise InvalidValueError(f"{label} must be 32 bytes, got {len(raw)}")
    return raw


def make_checkpoint(valset: ValsetArgs, hyperion_id: bytes) -> bytes:
    """
    Digest of a validator set.

    keccak256(abi.encode(hyperionId, "checkpoint", valsetNonce, validators,
    powers, rewardAmount, rewardToken))
    """
    return hash_abi(CHECKPOINT_TYPES, [
        hyperion_id,
        CHECKPOINT_TAG,
        valset.valset_nonce,
        valset.validators,
        valset.powers,
        valset.reward_amount,
        valset.reward_token,
    ])


def make_batch_digest(
    hyperion_id: bytes,
    amounts: Sequence[int],
    destinations: Sequence[str],
    fees: Sequence[int],
    batch_nonce: int,
    token_contract: str,
    batch_timeout: int,
) -> bytes:
    """
    Digest validators sign to release a batch.

    keccak256(abi.encode(hyperionId, "transactionBatch", amounts,
    destinations, fees, batchNonce, tokenContract, batchTimeout))
    """
    return hash_abi(BATCH_TYPES, [
        hyperion_id,
        TRANSACTION_BATCH_TAG,
        list(amounts),
        list(destinations),
        list(fees),
        batch_nonce,
        token_contract,
        batch_timeout,
    ])


def batch_invalidation_key(token_contract: str) -> bytes:
    """Key of a token's batch scope in the invalidation mapping."""
    return hash_abi(('bytes32', 'address'), [TRANSACTION_BATCH_TAG, token_contract])


def validate_signature_arrays(
    valset: ValsetArgs,
    v: Sequence[int],
    r: Sequence[bytes],
    s: Sequence[bytes],
) -> None:
    n = len(valset.validators)
    if not (len(valset.powers) == n and len(v) == n and len(r) == n and len(s) == n):
        raise ConsistencyError("Malformed current validator set")


def check_validator_signatures(
    valset: ValsetArgs,
    v: Sequence[int],
    r: Sequence[bytes],
    s: Sequence[bytes],
    digest: bytes,
    power_threshold: int,
) -> int:
    """
    Verify that *valset* signed *digest* with at least *power_threshold*.

    Index *i* abstains when its power is zero or ``v[i] == 0``. Any other
    index must recover to ``validators[i]``. Returns as soon as the
    cumulative power reaches the threshold.

    Returns:
        The cumulative power counted

    Raises:
        InvalidSignatureError: A signature recovers to the wrong address
        InsufficientPowerError: Signers hold less than the threshold
    """
    msg_hash = eth_signed_message_hash(digest)
    cumulative_power = 0
    for i, validator in enumerate(valset.validators):
        if valset.powers[i] == 0 or v[i] == 0:
            continue
        if ecrecover(msg_hash, v[i], r[i], s[i]) != validator:
            raise InvalidSignatureError("Validator signature does not match.")
        cumulative_power += valset.powers[i]
        if cumulative_power >= power_threshold:
            return cumulative_power

    raise InsufficientPowerError("Submitted validator set signatures do not have enough power.")

"""
Validator-side signing of valset and batch confirmations.
"""

from ..bridge.checkpoint import make_batch_digest, make_checkpoint
from ..crypto.keys import PrivateKey
from ..crypto.signing import sign_digest
from ..logger import get_logger
from .models import BatchConfirm, OutgoingTxBatch, Valset, ValsetConfirm

logger = get_logger(__name__)


def valset_digest(valset: Valset, hyperion_id: bytes) -> bytes:
    return make_checkpoint(valset.to_valset_args(), hyperion_id)


def batch_digest(batch: OutgoingTxBatch, hyperion_id: bytes) -> bytes:
    amounts, destinations, fees = batch.checkpoint_values()
    return make_batch_digest(
        hyperion_id,
        amounts,
        destinations,
        fees,
        batch.batch_nonce,
        batch.token_contract,
        batch.batch_timeout,
    )


def sign_valset_confirm(private_key: PrivateKey, valset: Valset, hyperion_id: bytes) -> ValsetConfirm:
    """Sign the checkpoint of *valset*; the signature is 65 bytes, hex encoded."""
    signature = sign_digest(private_key, valset_digest(valset, hyperion_id))
    logger.debug(f"Signed valset confirm valset_nonce={valset.nonce} signer={private_key.address}")
    return ValsetConfirm(
        nonce=valset.nonce,
        eth_address=private_key.address,
        signature=signature.to_hex(),
    )


def sign_batch_confirm(private_key: PrivateKey, batch: OutgoingTxBatch, hyperion_id: bytes) -> BatchConfirm:
    signature = sign_digest(private_key, batch_digest(batch, hyperion_id))
    logger.debug(
        f"Signed batch confirm batch_nonce={batch.batch_nonce} token={batch.token_contract} "
        f"signer={private_key.address}"
    )
    return BatchConfirm(
        nonce=batch.batch_nonce,
        token_contract=batch.token_contract,
        eth_signer=private_key.address,
        signature=signature.to_hex(),
    )

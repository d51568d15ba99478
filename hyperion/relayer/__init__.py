"""
Hyperion Relayer Module

Off-chain helpers: validator signing of confirmations and the relayer
logic that packs them into updateValset / submitBatch calls.
"""

from .models import (
    BatchConfirm,
    BridgeValidator,
    OutgoingTransferTx,
    OutgoingTxBatch,
    Valset,
    ValsetConfirm,
)
from .repack import (
    RepackedSignatures,
    SubmitBatchCall,
    ValsetUpdateCall,
    check_batch_sigs_and_repack,
    check_valset_sigs_and_repack,
    hyperion_power_to_percent,
    prepare_transaction_batch,
    prepare_valset_update,
    relay,
    sig_to_vrs,
)
from .signer import batch_digest, sign_batch_confirm, sign_valset_confirm, valset_digest

__all__ = [
    # Models
    "BridgeValidator",
    "Valset",
    "OutgoingTransferTx",
    "OutgoingTxBatch",
    "ValsetConfirm",
    "BatchConfirm",
    # Signing
    "valset_digest",
    "batch_digest",
    "sign_valset_confirm",
    "sign_batch_confirm",
    # Repacking
    "RepackedSignatures",
    "ValsetUpdateCall",
    "SubmitBatchCall",
    "sig_to_vrs",
    "hyperion_power_to_percent",
    "check_valset_sigs_and_repack",
    "check_batch_sigs_and_repack",
    "prepare_valset_update",
    "prepare_transaction_batch",
    "relay",
]

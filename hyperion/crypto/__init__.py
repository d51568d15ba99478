"""
Hyperion Crypto Module

Cryptographic primitives for the bridge:
- Keccak-256 and the Ethereum signed-message envelope
- secp256k1 keys, personal-sign and ecrecover
- EIP-55 addresses and CREATE address derivation
- ABI encoding, selectors and event topics
"""

from .address import (
    generate_contract_address,
    is_valid_address,
    is_zero_address,
    normalize_address,
    same_address,
    to_checksum_address,
)
from .encoding import (
    abi_encode,
    bytes32_tag,
    compute_event_topic,
    compute_function_selector,
    decode_function_call,
    encode_function_call,
    hash_abi,
)
from .hashing import eth_signed_message_hash, keccak256, keccak256_hex
from .keys import PrivateKey, PublicKey, Signature, generate_keypair
from .signing import (
    ecrecover,
    recover_digest_signer,
    sign_digest,
    split_signature,
)

__all__ = [
    # Keys
    "PrivateKey",
    "PublicKey",
    "Signature",
    "generate_keypair",
    # Signing
    "ecrecover",
    "recover_digest_signer",
    "sign_digest",
    "split_signature",
    # Hashing
    "eth_signed_message_hash",
    "keccak256",
    "keccak256_hex",
    # Address
    "generate_contract_address",
    "is_valid_address",
    "is_zero_address",
    "normalize_address",
    "same_address",
    "to_checksum_address",
    # Encoding
    "abi_encode",
    "bytes32_tag",
    "compute_event_topic",
    "compute_function_selector",
    "decode_function_call",
    "encode_function_call",
    "hash_abi",
]

"""
Hyperion Crypto Hashing Module

Keccak-256 is the only hash the bridge protocol uses: checkpoints, batch
digests, the signed-message envelope, addresses and event topics.
"""

from typing import Union

from eth_utils import keccak

from ..constants import ETH_SIGNED_MESSAGE_PREFIX


def keccak256(data: Union[bytes, str]) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum standard).

    Args:
        data: Input bytes or 0x-prefixed hex string

    Returns:
        32-byte hash
    """
    if isinstance(data, str):
        return keccak(hexstr=data)
    return keccak(data)


def keccak256_hex(data: Union[bytes, str]) -> str:
    """
    Compute Keccak-256 hash and return as hex string.

    Returns:
        Hex string with 0x prefix
    """
    return '0x' + keccak256(data).hex()


def keccak256_text(text: str) -> bytes:
    """Keccak-256 of a UTF-8 string (function and event signatures)."""
    return keccak(text=text)


def eth_signed_message_hash(digest: bytes) -> bytes:
    """
    Wrap a 32-byte digest in the Ethereum signed-message envelope.

    Mirrors ``ECDSA.toEthSignedMessageHash(bytes32)``:
    keccak256("\\x19Ethereum Signed Message:\\n32" ‖ digest).
    """
    if len(digest) != 32:
        raise ValueError(f"Digest must be 32 bytes, got {len(digest)}")
    return keccak(ETH_SIGNED_MESSAGE_PREFIX + digest)

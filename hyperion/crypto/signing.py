"""
Hyperion Crypto Signing Module

Personal-sign style signing of 32-byte digests and the ``ecrecover``
primitive the checkpoint engine verifies them with.
"""

from typing import Tuple, Union

from eth_keys.exceptions import BadSignature

from .address import to_checksum_address
from .hashing import eth_signed_message_hash
from .keys import PrivateKey, PublicKey, Signature
from ..constants import ZERO_ADDRESS


def sign_digest(private_key: PrivateKey, digest: bytes) -> Signature:
    """
    Sign a checkpoint or batch digest the way validators do.

    The digest is wrapped in "\\x19Ethereum Signed Message:\\n32" before
    hashing and signing, which is what ``personal_sign`` produces for a
    32-byte payload.

    Args:
        private_key: Validator key
        digest: 32-byte checkpoint / batch digest

    Returns:
        Signature with v in 27/28 form
    """
    return private_key.sign_msg_hash(eth_signed_message_hash(digest))


def recover_public_key(msg_hash: bytes, signature: Signature) -> PublicKey:
    return PublicKey.recover_from_msg_hash(msg_hash, signature)


def ecrecover(msg_hash: bytes, v: int, r: Union[int, bytes], s: Union[int, bytes]) -> str:
    """
    Recover signer address from signature components.

    Mirrors the EVM ``ecrecover`` precompile: malformed input yields the
    zero address instead of raising.

    Args:
        msg_hash: 32-byte message hash
        v: Recovery parameter (27 or 28)
        r: R component (int or bytes32)
        s: S component (int or bytes32)

    Returns:
        Recovered checksum address, or the zero address
    """
    if isinstance(r, (bytes, bytearray)):
        r = int.from_bytes(r, 'big')
    if isinstance(s, (bytes, bytearray)):
        s = int.from_bytes(s, 'big')
    if v not in (27, 28) or r == 0 or s == 0:
        return ZERO_ADDRESS
    try:
        signature = Signature.from_vrs(v, r, s)
        return to_checksum_address(recover_public_key(msg_hash, signature).to_address())
    except BadSignature:
        return ZERO_ADDRESS


def recover_digest_signer(digest: bytes, signature: Signature) -> str:
    """Inverse of sign_digest."""
    v, r, s = signature.vrs
    return ecrecover(eth_signed_message_hash(digest), v, r, s)


def split_signature(signature: Signature) -> Tuple[int, bytes, bytes]:
    """Split into the (uint8 v, bytes32 r, bytes32 s) triple the contract takes."""
    return (
        signature.v,
        signature.r.to_bytes(32, 'big'),
        signature.s.to_bytes(32, 'big'),
    )

"""
Hyperion Crypto Address Module

Ethereum addresses in EIP-55 checksum form are the canonical representation
used everywhere in the bridge: storage keys, event fields and comparisons.
"""

from typing import Union

import rlp
from eth_utils import is_address, to_checksum_address as _to_checksum_address

from .hashing import keccak256
from ..constants import ZERO_ADDRESS
from ..exceptions import InvalidAddressError


ADDRESS_LENGTH = 20


def to_checksum_address(address: Union[str, bytes]) -> str:
    """
    Convert an address to EIP-55 checksum format.

    Args:
        address: 0x-prefixed hex string or 20 raw bytes

    Returns:
        Checksum address with 0x prefix

    Raises:
        InvalidAddressError: If the value is not a 20-byte address
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != ADDRESS_LENGTH:
            raise InvalidAddressError(f"Address must be {ADDRESS_LENGTH} bytes, got {len(address)}")
        return _to_checksum_address(bytes(address))
    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddressError(f"Invalid address: {address!r}")
    return _to_checksum_address(address)


def normalize_address(address: Union[str, bytes]) -> str:
    """Alias of to_checksum_address used at contract entry points."""
    return to_checksum_address(address)


def is_valid_address(address) -> bool:
    """Check whether *address* is a well-formed 20-byte hex address."""
    return isinstance(address, str) and is_address(address)


def is_zero_address(address: str) -> bool:
    return int(address, 16) == 0


def same_address(a: str, b: str) -> bool:
    """Case-insensitive address comparison."""
    return a.lower() == b.lower()


def address_to_bytes(address: str) -> bytes:
    return bytes.fromhex(to_checksum_address(address)[2:])


def generate_contract_address(sender: str, nonce: int) -> str:
    """
    Generate contract address using CREATE opcode logic.

    Address = keccak256(rlp([sender, nonce]))[-20:]

    Args:
        sender: Deployer address
        nonce: Deployer account nonce

    Returns:
        Contract address (checksum format)
    """
    rlp_encoded = rlp.encode([address_to_bytes(sender), nonce])
    return _to_checksum_address(keccak256(rlp_encoded)[-20:])


__all__ = [
    "ZERO_ADDRESS",
    "address_to_bytes",
    "generate_contract_address",
    "is_valid_address",
    "is_zero_address",
    "normalize_address",
    "same_address",
    "to_checksum_address",
]

"""
Validator keys.

Orchestrators sign checkpoints and batch digests with secp256k1 keys. The curve
math lives in eth-keys; these wrappers pin the bridge conventions on top of it
(checksum addresses, ``v`` in 27/28 form, 65-byte r‖s‖v encoding).
"""

import secrets
from dataclasses import dataclass
from typing import Tuple

from eth_keys import keys as eth_keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import decode_hex

from ..exceptions import InvalidKeyError

SIGNATURE_LENGTH = 65


@dataclass(frozen=True)
class Signature:
    """ECDSA signature with ``v`` already shifted to the ecrecover range."""

    v: int
    r: int
    s: int

    @classmethod
    def from_vrs(cls, v: int, r: int, s: int) -> "Signature":
        """
        Accepts v as 27/28 or as a bare 0/1 recovery id.

        Raises:
            BadSignature: If r, s or v fall outside the curve's range
        """
        recovery_id = v - 27 if v >= 27 else v
        try:
            eth_keys.Signature(vrs=(recovery_id, r, s))
        except ValidationError as e:
            raise BadSignature(str(e)) from e
        return cls(recovery_id + 27, r, s)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Signature":
        if len(raw) != SIGNATURE_LENGTH:
            raise ValueError(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")
        return cls.from_vrs(raw[64], int.from_bytes(raw[:32], 'big'), int.from_bytes(raw[32:64], 'big'))

    @classmethod
    def from_hex(cls, hex_str: str) -> "Signature":
        return cls.from_bytes(decode_hex(hex_str))

    @property
    def vrs(self) -> Tuple[int, int, int]:
        return self.v, self.r, self.s

    def to_eth_keys(self) -> eth_keys.Signature:
        return eth_keys.Signature(vrs=(self.v - 27, self.r, self.s))

    def to_bytes(self) -> bytes:
        return self.r.to_bytes(32, 'big') + self.s.to_bytes(32, 'big') + bytes([self.v])

    def to_hex(self) -> str:
        return '0x' + self.to_bytes().hex()


class PublicKey:
    def __init__(self, key: eth_keys.PublicKey):
        self._key = key

    @classmethod
    def recover_from_msg_hash(cls, msg_hash: bytes, signature: Signature) -> "PublicKey":
        return cls(signature.to_eth_keys().recover_public_key_from_msg_hash(msg_hash))

    def to_bytes(self) -> bytes:
        return self._key.to_bytes()

    def to_address(self) -> str:
        return self._key.to_checksum_address()

    def __eq__(self, other) -> bool:
        return isinstance(other, PublicKey) and self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"PublicKey({self.to_address()})"


class PrivateKey:
    """A validator's signing key. Never logged; ``repr`` shows the address only."""

    def __init__(self, key_bytes: bytes):
        if len(key_bytes) != 32:
            raise InvalidKeyError(f"Private key must be 32 bytes, got {len(key_bytes)}")
        try:
            self._key = eth_keys.PrivateKey(key_bytes)
        except ValidationError as e:
            raise InvalidKeyError(f"Invalid private key: {e}") from e

    @classmethod
    def from_hex(cls, hex_str: str) -> "PrivateKey":
        return cls(decode_hex(hex_str))

    @classmethod
    def from_int(cls, secret: int) -> "PrivateKey":
        # devnets and tests use small integers as keys
        return cls(secret.to_bytes(32, 'big'))

    @classmethod
    def generate(cls) -> "PrivateKey":
        return cls(secrets.token_bytes(32))

    @property
    def public_key(self) -> PublicKey:
        return PublicKey(self._key.public_key)

    @property
    def address(self) -> str:
        return self._key.public_key.to_checksum_address()

    def to_bytes(self) -> bytes:
        return self._key.to_bytes()

    def to_hex(self) -> str:
        return '0x' + self.to_bytes().hex()

    def sign_msg_hash(self, msg_hash: bytes) -> Signature:
        if len(msg_hash) != 32:
            raise ValueError(f"Message hash must be 32 bytes, got {len(msg_hash)}")
        signed = self._key.sign_msg_hash(msg_hash)
        return Signature(signed.v + 27, signed.r, signed.s)

    def __eq__(self, other) -> bool:
        return isinstance(other, PrivateKey) and self.to_bytes() == other.to_bytes()

    def __repr__(self) -> str:
        return f"PrivateKey({self.address})"


def generate_keypair() -> Tuple[PrivateKey, PublicKey]:
    key = PrivateKey.generate()
    return key, key.public_key

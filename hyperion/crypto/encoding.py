"""
ABI Encoding

Thin helpers over eth-abi for the encodings the bridge signs and emits:
``abi.encode`` payloads, function selectors, calldata and event topics.
"""

from typing import Any, List, Sequence, Tuple

from eth_abi import decode, encode

from .hashing import keccak256, keccak256_text


def abi_encode(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """``abi.encode(...)`` of *values* typed by *types*."""
    return encode(list(types), list(values))


def bytes32_tag(text: str) -> bytes:
    """ASCII text right-padded with zeros to 32 bytes."""
    raw = text.encode('ascii')
    if len(raw) > 32:
        raise ValueError(f"Tag {text!r} does not fit in bytes32")
    return raw.ljust(32, b'\x00')


def split_signature_types(signature: str) -> List[str]:
    """
    Parse argument types from a canonical signature.

    E.g. "transfer(address,uint256)" -> ['address', 'uint256'].
    Tuple arguments such as "(address[],uint256[])" are kept whole.
    """
    args = signature[signature.index('(') + 1:signature.rindex(')')]
    types, depth, current = [], 0, ''
    for char in args:
        if char == ',' and depth == 0:
            types.append(current)
            current = ''
            continue
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
        current += char
    if current:
        types.append(current)
    return types


def compute_function_selector(signature: str) -> bytes:
    """First four bytes of keccak256 of the canonical function signature."""
    return keccak256_text(signature)[:4]


def compute_event_topic(signature: str) -> bytes:
    """topic0 of an event: keccak256 of its canonical signature."""
    return keccak256_text(signature)


def encode_function_call(signature: str, *args) -> bytes:
    """
    Encode function call data (selector + ABI-encoded arguments).

    Args:
        signature: Canonical function signature
        *args: Function arguments

    Returns:
        Encoded call data
    """
    selector = compute_function_selector(signature)
    arg_types = split_signature_types(signature)
    if not arg_types:
        return selector
    return selector + encode(arg_types, list(args))


def decode_function_call(signature: str, data: bytes) -> Tuple[Any, ...]:
    """Decode calldata produced by encode_function_call."""
    if data[:4] != compute_function_selector(signature):
        raise ValueError(f"Calldata selector does not match {signature}")
    return decode(split_signature_types(signature), data[4:])


def hash_abi(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """keccak256(abi.encode(...))."""
    return keccak256(abi_encode(types, values))

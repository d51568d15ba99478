"""
Hyperion contract ABI.

Canonical ABI signatures of the public surface, their selectors, the
event topics, and calldata encoding/decoding so a relayer can build the
exact bytes it would send to the deployed contract.
"""

from typing import Any, Dict, List, Tuple

from ..crypto.address import to_checksum_address
from ..crypto.encoding import (
    compute_function_selector,
    decode_function_call,
    encode_function_call,
    split_signature_types,
)
from ..evm.chain import Chain
from ..evm.contract import Contract
from ..evm.events import Receipt
from .types import (
    ERC20DeployedEvent,
    OwnershipTransferred,
    Paused,
    SendToCosmosEvent,
    SendToHeliosEvent,
    TransactionBatchExecutedEvent,
    Unpaused,
    ValsetArgs,
    ValsetUpdatedEvent,
)

VALSET_ARGS_TUPLE = "(address[],uint256[],uint256,uint256,address)"

HYPERION_METHODS: Dict[str, str] = {
    # Lifecycle
    "initialize": "initialize(bytes32,uint256,address[],uint256[])",
    "emergencyPause": "emergencyPause()",
    "emergencyUnpause": "emergencyUnpause()",
    "transferOwnership": "transferOwnership(address)",
    "renounceOwnership": "renounceOwnership()",
    "renounceOwnershipAfterExpiry": "renounceOwnershipAfterExpiry()",
    # Validator set / batches
    "updateValset": (
        f"updateValset({VALSET_ARGS_TUPLE},{VALSET_ARGS_TUPLE},uint8[],bytes32[],bytes32[])"
    ),
    "submitBatch": (
        f"submitBatch({VALSET_ARGS_TUPLE},uint8[],bytes32[],bytes32[],"
        "uint256[],address[],uint256[],uint256,address,uint256)"
    ),
    # Outbound
    "sendToHelios": "sendToHelios(address,bytes32,uint256,string)",
    "sendToCosmos": "sendToCosmos(address,bytes32,uint256)",
    # Factory
    "deployERC20": "deployERC20(string,string,string,uint8)",
    "deployERC20WithSupply": "deployERC20WithSupply(string,string,string,uint8,uint256)",
    # Views
    "state_hyperionId": "state_hyperionId()",
    "state_powerThreshold": "state_powerThreshold()",
    "state_lastValsetCheckpoint": "state_lastValsetCheckpoint()",
    "state_lastValsetNonce": "state_lastValsetNonce()",
    "state_lastEventNonce": "state_lastEventNonce()",
    "state_lastEventHeight": "state_lastEventHeight()",
    "state_lastValsetHeight": "state_lastValsetHeight()",
    "state_lastBatchNonces": "state_lastBatchNonces(address)",
    "state_invalidationMapping": "state_invalidationMapping(bytes32)",
    "isHeliosNativeToken": "isHeliosNativeToken(address)",
    "owner": "owner()",
    "paused": "paused()",
    "getOwnershipExpiryTimestamp": "getOwnershipExpiryTimestamp()",
    "isOwnershipExpired": "isOwnershipExpired()",
    "lastBatchNonce": "lastBatchNonce(address)",
}

# ABI name -> Python method on Hyperion
PYTHON_METHOD_NAMES: Dict[str, str] = {
    "initialize": "initialize",
    "emergencyPause": "emergency_pause",
    "emergencyUnpause": "emergency_unpause",
    "transferOwnership": "transfer_ownership",
    "renounceOwnership": "renounce_ownership",
    "renounceOwnershipAfterExpiry": "renounce_ownership_after_expiry",
    "updateValset": "update_valset",
    "submitBatch": "submit_batch",
    "sendToHelios": "send_to_helios",
    "sendToCosmos": "send_to_cosmos",
    "deployERC20": "deploy_erc20",
    "deployERC20WithSupply": "deploy_erc20_with_supply",
    "state_hyperionId": "state_hyperion_id",
    "state_powerThreshold": "state_power_threshold",
    "state_lastValsetCheckpoint": "state_last_valset_checkpoint",
    "state_lastValsetNonce": "state_last_valset_nonce",
    "state_lastEventNonce": "state_last_event_nonce",
    "state_lastEventHeight": "state_last_event_height",
    "state_lastValsetHeight": "state_last_valset_height",
    "state_lastBatchNonces": "state_last_batch_nonces",
    "state_invalidationMapping": "state_invalidation_mapping",
    "isHeliosNativeToken": "is_helios_native_token",
    "owner": "owner",
    "paused": "paused",
    "getOwnershipExpiryTimestamp": "get_ownership_expiry_timestamp",
    "isOwnershipExpired": "is_ownership_expired",
    "lastBatchNonce": "last_batch_nonce",
}

HYPERION_SELECTORS: Dict[bytes, str] = {
    compute_function_selector(signature): name
    for name, signature in HYPERION_METHODS.items()
}

EVENT_TYPES = (
    ValsetUpdatedEvent,
    SendToHeliosEvent,
    SendToCosmosEvent,
    TransactionBatchExecutedEvent,
    ERC20DeployedEvent,
    Paused,
    Unpaused,
    OwnershipTransferred,
)

EVENT_TOPICS: Dict[bytes, type] = {event.topic(): event for event in EVENT_TYPES}


def selector(method: str) -> bytes:
    return compute_function_selector(HYPERION_METHODS[method])


def _to_abi(value: Any) -> Any:
    if isinstance(value, ValsetArgs):
        return value.to_abi_tuple()
    return value


def encode_call(method: str, *args: Any) -> bytes:
    """
    ABI-encode a call to *method* (ABI name).

    ValsetArgs arguments are encoded as the struct tuple.
    """
    return encode_function_call(HYPERION_METHODS[method], *[_to_abi(a) for a in args])


def _from_abi(abi_type: str, value: Any) -> Any:
    if abi_type == VALSET_ARGS_TUPLE:
        return ValsetArgs.from_abi_tuple(value)
    if abi_type == 'address':
        return to_checksum_address(value)
    if abi_type == 'address[]':
        return [to_checksum_address(a) for a in value]
    if abi_type.endswith('[]'):
        return list(value)
    return value


def decode_call(data: bytes) -> Tuple[str, List[Any]]:
    """
    Decode calldata into (ABI method name, arguments).

    Raises:
        ValueError: If the selector is unknown
    """
    method = HYPERION_SELECTORS.get(bytes(data[:4]))
    if method is None:
        raise ValueError(f"Unknown selector 0x{bytes(data[:4]).hex()}")
    signature = HYPERION_METHODS[method]
    values = decode_function_call(signature, data)
    types = split_signature_types(signature)
    return method, [_from_abi(t, v) for t, v in zip(types, values)]


def transact_calldata(chain: Chain, sender: str, contract: Contract, data: bytes) -> Receipt:
    """Send raw calldata to a deployed Hyperion as *sender*."""
    method, args = decode_call(data)
    return chain.transact(sender, getattr(contract, PYTHON_METHOD_NAMES[method]), *args)

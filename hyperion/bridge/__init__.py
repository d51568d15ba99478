"""
Hyperion Bridge Module

The Hyperion contracts and everything needed to talk to them:
  - ValsetArgs and the bridge events
  - checkpoint / batch digests and the weighted signature check
  - Hyperion and HyperionSubgraph
  - the contract ABI and deployment helpers
"""

from .abi import (
    EVENT_TOPICS,
    HYPERION_METHODS,
    HYPERION_SELECTORS,
    decode_call,
    encode_call,
    selector,
    transact_calldata,
)
from .checkpoint import (
    batch_invalidation_key,
    check_validator_signatures,
    make_batch_digest,
    make_checkpoint,
)
from .deploy import chain_from_config, deploy_hyperion
from .hyperion import Hyperion
from .subgraph import HyperionSubgraph
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

__all__ = [
    # Contracts
    "Hyperion",
    "HyperionSubgraph",
    # Types and events
    "ValsetArgs",
    "ValsetUpdatedEvent",
    "SendToHeliosEvent",
    "SendToCosmosEvent",
    "TransactionBatchExecutedEvent",
    "ERC20DeployedEvent",
    "OwnershipTransferred",
    "Paused",
    "Unpaused",
    # Checkpoint engine
    "make_checkpoint",
    "make_batch_digest",
    "batch_invalidation_key",
    "check_validator_signatures",
    # ABI
    "HYPERION_METHODS",
    "HYPERION_SELECTORS",
    "EVENT_TOPICS",
    "selector",
    "encode_call",
    "decode_call",
    "transact_calldata",
    # Deployment
    "chain_from_config",
    "deploy_hyperion",
]

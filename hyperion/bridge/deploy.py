"""
Deployment helpers.

Stand up a chain and an initialized bridge from a HyperionConfig.
"""

from typing import Optional, Union

from ..config.loader import HyperionConfig
from ..evm.chain import Chain
from ..logger import get_logger, set_level
from .hyperion import Hyperion
from .subgraph import HyperionSubgraph

logger = get_logger(__name__)


def chain_from_config(config: HyperionConfig) -> Chain:
    set_level(config.logging.level)
    return Chain(
        chain_id=config.chain.chain_id,
        block_number=config.chain.start_block,
        timestamp=config.chain.genesis_timestamp,
        block_time=config.chain.block_time,
    )


def deploy_hyperion(
    chain: Chain,
    deployer: str,
    config: HyperionConfig,
    subgraph: Optional[bool] = None,
) -> Union[Hyperion, HyperionSubgraph]:
    """
    Deploy and initialize a bridge in one transaction.

    Args:
        chain: Target chain
        deployer: Account that becomes the owner
        config: Validated deployment configuration
        subgraph: Deploy HyperionSubgraph; defaults to config.bridge.subgraph

    Returns:
        The deployed contract

    Raises:
        ConfigurationError: If the config does not validate
    """
    config.validate()
    use_subgraph = config.bridge.subgraph if subgraph is None else subgraph
    contract_cls = HyperionSubgraph if use_subgraph else Hyperion

    bridge = chain.deploy(
        deployer,
        contract_cls,
        config.bridge.hyperion_id_bytes,
        config.bridge.power_threshold,
        list(config.bridge.validators),
        list(config.bridge.powers),
    )
    logger.info(
        f"Deployed {contract_cls.__name__} at {bridge.address} on chain {chain.chain_id} "
        f"(validators={len(config.bridge.validators)}, threshold={config.bridge.power_threshold})"
    )
    return bridge

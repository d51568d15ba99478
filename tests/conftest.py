import pytest

from hyperion.bridge import Hyperion, HyperionSubgraph
from hyperion.evm import Chain

from bridge_helpers import (
    DEPLOYER,
    GENESIS_POWERS,
    GENESIS_VALIDATORS,
    HYPERION_ID,
    POWER_THRESHOLD,
    USER,
    MockERC20,
)

USER_FUNDS = 1_000_000


@pytest.fixture
def chain():
    return Chain()


@pytest.fixture
def bridge(chain):
    """Hyperion initialized with A, B, C at 100 power each, threshold 200."""
    return chain.deploy(
        DEPLOYER, Hyperion, HYPERION_ID, POWER_THRESHOLD, GENESIS_VALIDATORS, GENESIS_POWERS
    )


@pytest.fixture
def subgraph(chain):
    return chain.deploy(
        DEPLOYER, HyperionSubgraph, HYPERION_ID, POWER_THRESHOLD, GENESIS_VALIDATORS, GENESIS_POWERS
    )


@pytest.fixture
def token(chain):
    """A foreign ERC-20 with USER holding USER_FUNDS."""
    erc20 = chain.deploy(DEPLOYER, MockERC20, "Mock Token", "MOCK", 18)
    chain.transact(DEPLOYER, erc20.mint, USER, USER_FUNDS)
    return erc20

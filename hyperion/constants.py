"""
Hyperion Bridge Constants

Protocol constants of the Hyperion bridge, grouped by concern, plus the
logging settings read from an optional .env file.
"""
from typing import Optional

from dotenv import dotenv_values

# =============================================================================
# LOGGING SETTINGS (.env)
# =============================================================================
_dotenv = dotenv_values(".env")


def _setting(key: str, default: str) -> str:
    value: Optional[str] = _dotenv.get(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def _flag(key: str, default: bool) -> bool:
    value = _setting(key, "").casefold()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DEFAULT_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

LOG_LEVEL = _setting("HYPERION_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = _setting("HYPERION_LOG_FORMAT", DEFAULT_LOG_FORMAT)
LOG_DATE_FORMAT = _setting("HYPERION_LOG_DATE_FORMAT", DEFAULT_LOG_DATE_FORMAT)
LOG_CONSOLE_HIGHLIGHTING = _flag("HYPERION_LOG_CONSOLE_HIGHLIGHTING", True)
LOG_FILE_OUTPUT = _flag("HYPERION_LOG_FILE_OUTPUT", False)
LOG_FILE_NAME = _setting("HYPERION_LOG_FILE", "logs/hyperion.log")

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5


# WARNING: THE PROTOCOL VALUES BELOW ARE PART OF THE SIGNED WIRE FORMAT. CHANGING THEM BREAKS
# DIGEST COMPATIBILITY WITH OFF-CHAIN SIGNERS AND THE DEPLOYED CONTRACTS.

# ==================================================================================
# ABI / EVM PRIMITIVES
# ==================================================================================
MAX_UINT256 = 2 ** 256 - 1
MAX_UINT8 = 2 ** 8 - 1
ZERO_ADDRESS = '0x' + '00' * 20
ZERO_BYTES32 = b'\x00' * 32


# ==================================================================================
# DIGEST TAGS
# ==================================================================================
CHECKPOINT_METHOD_NAME = "checkpoint"
TRANSACTION_BATCH_METHOD_NAME = "transactionBatch"

# Prefix applied to a 32-byte digest before ecrecover
ETH_SIGNED_MESSAGE_PREFIX = b'\x19Ethereum Signed Message:\n32'


# ==================================================================================
# REPLAY / ORDERING
# ==================================================================================
# A nonce may never jump ahead by this much or more in a single step.
# A far-future nonce would otherwise permanently brick progress.
NONCE_JUMP_LIMIT = 10 ** 15


# ==================================================================================
# LIFECYCLE
# ==================================================================================
# Window during which the deployer keeps owner privileges (4 weeks)
OWNERSHIP_EXPIRY_DURATION = 60 * 60 * 24 * 7 * 4


# ==================================================================================
# SIMULATED CHAIN
# ==================================================================================
DEFAULT_CHAIN_ID = 1
BLOCK_TIME = 12  # seconds per block
GENESIS_TIMESTAMP = 1_700_000_000


# ==================================================================================
# RELAYER
# ==================================================================================
# Helios normalizes validator power to u32 max every time a valset is created
TOTAL_HYPERION_POWER = 2 ** 32 - 1

# Minimum share of the signing set's power a relayer collects before submitting
RELAYER_MIN_POWER_PERCENT = 66



"""
Hyperion TOML Configuration Loader

Loads a bridge deployment description from hyperion.toml with environment
variable overrides.

Environment variable mapping:
    [chain]   chain_id        → HYPERION_CHAIN_ID
    [bridge]  hyperion_id     → HYPERION_ID
    [bridge]  power_threshold → HYPERION_POWER_THRESHOLD
    [logging] level           → HYPERION_LOG_LEVEL

Validator keys never live in the config; only addresses and powers do.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from eth_utils import decode_hex

from ..constants import BLOCK_TIME, DEFAULT_CHAIN_ID, GENESIS_TIMESTAMP
from ..crypto.address import is_valid_address, to_checksum_address
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Section dataclasses, one per [section] of hyperion.toml
# ---------------------------------------------------------------------------

@dataclass
class ChainSectionConfig:
    """[chain] section."""
    chain_id: int = DEFAULT_CHAIN_ID
    block_time: int = BLOCK_TIME
    start_block: int = 1
    genesis_timestamp: int = GENESIS_TIMESTAMP

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChainSectionConfig":
        return cls(
            chain_id=data.get("chain_id", DEFAULT_CHAIN_ID),
            block_time=data.get("block_time", BLOCK_TIME),
            start_block=data.get("start_block", 1),
            genesis_timestamp=data.get("genesis_timestamp", GENESIS_TIMESTAMP),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("HYPERION_CHAIN_ID"):
            self.chain_id = int(v)

    def validate(self) -> None:
        if self.chain_id < 1:
            raise ConfigurationError("chain_id must be >= 1")
        if self.block_time < 1:
            raise ConfigurationError("block_time must be >= 1")
        if self.start_block < 0:
            raise ConfigurationError("start_block must be >= 0")


@dataclass
class BridgeSectionConfig:
    """[bridge] section."""
    hyperion_id: str = ""
    power_threshold: int = 0
    validators: List[str] = field(default_factory=list)
    powers: List[int] = field(default_factory=list)
    subgraph: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeSectionConfig":
        return cls(
            hyperion_id=data.get("hyperion_id", ""),
            power_threshold=data.get("power_threshold", 0),
            validators=list(data.get("validators", [])),
            powers=list(data.get("powers", [])),
            subgraph=data.get("subgraph", False),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("HYPERION_ID"):
            self.hyperion_id = v
        if v := os.environ.get("HYPERION_POWER_THRESHOLD"):
            self.power_threshold = int(v)

    @property
    def hyperion_id_bytes(self) -> bytes:
        return decode_hex(self.hyperion_id)

    def validate(self) -> None:
        try:
            raw_id = self.hyperion_id_bytes
        except ValueError as e:
            raise ConfigurationError(f"hyperion_id is not valid hex: {self.hyperion_id!r}") from e
        if len(raw_id) != 32:
            raise ConfigurationError(f"hyperion_id must be 32 bytes, got {len(raw_id)}")
        if not self.validators:
            raise ConfigurationError("At least one validator is required")
        if len(self.validators) != len(self.powers):
            raise ConfigurationError(
                f"validators ({len(self.validators)}) and powers ({len(self.powers)}) differ in length"
            )
        for address in self.validators:
            if not is_valid_address(address):
                raise ConfigurationError(f"Invalid validator address: {address!r}")
        if any(p < 0 for p in self.powers):
            raise ConfigurationError("Validator powers must be non-negative")
        if self.power_threshold < 1:
            raise ConfigurationError("power_threshold must be >= 1")
        if sum(self.powers) < self.power_threshold:
            raise ConfigurationError(
                f"Total validator power {sum(self.powers)} is below power_threshold {self.power_threshold}"
            )


@dataclass
class LoggingSectionConfig:
    """[logging] section."""
    level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingSectionConfig":
        return cls(level=data.get("level", "INFO"))

    def apply_env(self) -> None:
        if v := os.environ.get("HYPERION_LOG_LEVEL"):
            self.level = v

    def validate(self) -> None:
        if self.level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.level}")


# -----------------------------------------------------------------------
# Top-level config
# -----------------------------------------------------------------------

@dataclass
class HyperionConfig:
    """
    Bridge deployment configuration.

    Everything needed to stand up a chain and an initialized Hyperion
    contract on it.
    """
    chain: ChainSectionConfig = field(default_factory=ChainSectionConfig)
    bridge: BridgeSectionConfig = field(default_factory=BridgeSectionConfig)
    logging: LoggingSectionConfig = field(default_factory=LoggingSectionConfig)

    # --- factories --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HyperionConfig":
        """Create HyperionConfig from a parsed TOML dict."""
        return cls(
            chain=ChainSectionConfig.from_dict(data.get("chain", {})),
            bridge=BridgeSectionConfig.from_dict(data.get("bridge", {})),
            logging=LoggingSectionConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "HyperionConfig":
        """
        Load configuration from a TOML file.

        A missing file yields the defaults (plus env overrides).

        Raises:
            ConfigurationError: If the file is not valid TOML
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.chain.apply_env()
        self.bridge.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Returns:
            True if all valid

        Raises:
            ConfigurationError: on invalid config
        """
        self.chain.validate()
        self.bridge.validate()
        self.logging.validate()
        return True

    # --- serialisation ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "chain": {
                "chain_id": self.chain.chain_id,
                "block_time": self.chain.block_time,
                "start_block": self.chain.start_block,
                "genesis_timestamp": self.chain.genesis_timestamp,
            },
            "bridge": {
                "hyperion_id": self.bridge.hyperion_id,
                "power_threshold": self.bridge.power_threshold,
                "validators": [
                    to_checksum_address(v) if is_valid_address(v) else v
                    for v in self.bridge.validators
                ],
                "powers": list(self.bridge.powers),
                "subgraph": self.bridge.subgraph,
            },
            "logging": {
                "level": self.logging.level,
            },
        }


def load_config(path: Optional[str] = None) -> HyperionConfig:
    """
    Load bridge configuration.

    Resolution order:
        1. Explicit *path* argument
        2. HYPERION_CONFIG env var
        3. ./hyperion.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("HYPERION_CONFIG", "hyperion.toml")

    return HyperionConfig.from_file(path)

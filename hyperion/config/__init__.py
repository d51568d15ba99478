"""
Hyperion Configuration

Loads hyperion.toml; environment variables override TOML values.
"""

from .loader import (
    BridgeSectionConfig,
    ChainSectionConfig,
    HyperionConfig,
    LoggingSectionConfig,
    load_config,
)

__all__ = [
    "HyperionConfig",
    "ChainSectionConfig",
    "BridgeSectionConfig",
    "LoggingSectionConfig",
    "load_config",
]

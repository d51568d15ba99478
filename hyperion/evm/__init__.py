"""
Hyperion EVM Module

Deterministic in-process execution environment for the bridge contracts.
"""

from .chain import Chain
from .contract import Contract, check_uint256
from .events import Event, Log, Receipt
from .state import StateManager

__all__ = [
    "Chain",
    "Contract",
    "Event",
    "Log",
    "Receipt",
    "StateManager",
    "check_uint256",
]

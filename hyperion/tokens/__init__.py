"""
Hyperion Tokens Module

ERC-20 tokens held by the bridge vault and the bridged Helios tokens it
deploys, plus the SafeERC20 call wrappers.
"""

from .erc20 import ERC20, Approval, HeliosERC20, Transfer
from .safe_erc20 import balance_of, safe_approve, safe_transfer, safe_transfer_from

__all__ = [
    "ERC20",
    "HeliosERC20",
    "Transfer",
    "Approval",
    "balance_of",
    "safe_approve",
    "safe_transfer",
    "safe_transfer_from",
]

"""
SafeERC20

Wrappers for ERC-20 calls made by the bridge. Tokens that return nothing
are treated as successful; a ``False`` return is a failure. Reverts raised
by the token propagate unchanged.
"""

from typing import Any

from ..evm.contract import Contract
from ..exceptions import TokenError


def _call_optional_return(caller: Contract, token: str, method: str, *args: Any) -> None:
    if not caller.chain.has_code(token):
        raise TokenError("Address: call to non-contract")
    result = caller.call(token, method, *args)
    if result is not None and not result:
        raise TokenError("SafeERC20: ERC20 operation did not succeed")


def safe_transfer(caller: Contract, token: str, to: str, value: int) -> None:
    """``token.transfer(to, value)`` on behalf of *caller*."""
    _call_optional_return(caller, token, "transfer", to, value)


def safe_transfer_from(caller: Contract, token: str, sender: str, to: str, value: int) -> None:
    """``token.transferFrom(sender, to, value)`` using *caller*'s allowance."""
    _call_optional_return(caller, token, "transfer_from", sender, to, value)


def safe_approve(caller: Contract, token: str, spender: str, value: int) -> None:
    _call_optional_return(caller, token, "approve", spender, value)


def balance_of(caller: Contract, token: str, account: str) -> int:
    return caller.call(token, "balance_of", account)

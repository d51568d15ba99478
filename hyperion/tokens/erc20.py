"""
ERC-20 Token Standard

Implements the fungible token the bridge custodies and deploys:
  - ERC-20 interface (transfer, approve, transfer_from, balance_of, allowance)
  - increase/decrease allowance helpers
  - unlimited allowance (2**256 - 1) that transfer_from never decrements
  - HeliosERC20: owner-only mint / burn for bridged Helios denoms
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from ..constants import MAX_UINT256, MAX_UINT8, ZERO_ADDRESS
from ..crypto.address import is_zero_address, normalize_address
from ..evm.contract import Contract, check_uint256
from ..evm.events import Event
from ..exceptions import InvalidValueError, TokenError
from ..lifecycle import Ownable, only_owner
from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Transfer(Event):
    """Emitted on every balance movement, including mint (from 0) and burn (to 0)."""
    SIGNATURE = "Transfer(address,address,uint256)"
    sender: str
    recipient: str
    value: int


@dataclass(frozen=True)
class Approval(Event):
    SIGNATURE = "Approval(address,address,uint256)"
    owner: str
    spender: str
    value: int


# ══════════════════════════════════════════════════════════════════════
#  ERC20
# ══════════════════════════════════════════════════════════════════════

class ERC20(Contract):
    """
    Standard ERC-20 token.

    Invariant: total_supply() == sum of all balances.
    """

    def __init__(self, chain, address, name: str, symbol: str, decimals: int = 18):
        super().__init__(chain, address)
        if not 0 <= decimals <= MAX_UINT8:
            raise InvalidValueError(f"decimals out of uint8 range: {decimals}")
        self._name = name
        self._symbol = symbol
        self._decimals = decimals
        self._total_supply = 0
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}

    # ── views ───────────────────────────────────────────────────────────

    def name(self) -> str:
        return self._name

    def symbol(self) -> str:
        return self._symbol

    def decimals(self) -> int:
        return self._decimals

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    # ── external ────────────────────────────────────────────────────────

    def transfer(self, recipient: str, amount: int) -> bool:
        self._transfer(self.msg_sender, normalize_address(recipient), amount)
        return True

    def approve(self, spender: str, amount: int) -> bool:
        self._approve(self.msg_sender, normalize_address(spender), amount)
        return True

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        sender = normalize_address(sender)
        self._spend_allowance(sender, self.msg_sender, amount)
        self._transfer(sender, normalize_address(recipient), amount)
        return True

    def increase_allowance(self, spender: str, added_value: int) -> bool:
        owner = self.msg_sender
        spender = normalize_address(spender)
        self._approve(owner, spender, check_uint256(self.allowance(owner, spender) + added_value, "allowance"))
        return True

    def decrease_allowance(self, spender: str, subtracted_value: int) -> bool:
        owner = self.msg_sender
        spender = normalize_address(spender)
        current = self.allowance(owner, spender)
        if current < subtracted_value:
            raise TokenError("ERC20: decreased allowance below zero")
        self._approve(owner, spender, current - subtracted_value)
        return True

    # ── internal ────────────────────────────────────────────────────────

    def _transfer(self, sender: str, recipient: str, amount: int) -> None:
        check_uint256(amount, "amount")
        if is_zero_address(sender):
            raise InvalidValueError("ERC20: transfer from the zero address")
        if is_zero_address(recipient):
            raise InvalidValueError("ERC20: transfer to the zero address")

        sender_balance = self._balances.get(sender, 0)
        if sender_balance < amount:
            raise TokenError("ERC20: transfer amount exceeds balance")
        self._balances[sender] = sender_balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

        self.emit(Transfer(sender=sender, recipient=recipient, value=amount))

    def _mint(self, account: str, amount: int) -> None:
        check_uint256(amount, "amount")
        if is_zero_address(account):
            raise InvalidValueError("ERC20: mint to the zero address")
        self._total_supply = check_uint256(self._total_supply + amount, "total supply")
        self._balances[account] = self._balances.get(account, 0) + amount
        self.emit(Transfer(sender=ZERO_ADDRESS, recipient=account, value=amount))

    def _burn(self, account: str, amount: int) -> None:
        check_uint256(amount, "amount")
        if is_zero_address(account):
            raise InvalidValueError("ERC20: burn from the zero address")
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise TokenError("ERC20: burn amount exceeds balance")
        self._balances[account] = balance - amount
        self._total_supply -= amount
        self.emit(Transfer(sender=account, recipient=ZERO_ADDRESS, value=amount))

    def _approve(self, owner: str, spender: str, amount: int) -> None:
        check_uint256(amount, "amount")
        if is_zero_address(owner):
            raise InvalidValueError("ERC20: approve from the zero address")
        if is_zero_address(spender):
            raise InvalidValueError("ERC20: approve to the zero address")
        self._allowances[(owner, spender)] = amount
        self.emit(Approval(owner=owner, spender=spender, value=amount))

    def _spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        current = self.allowance(owner, spender)
        if current == MAX_UINT256:
            return
        if current < amount:
            raise TokenError("ERC20: insufficient allowance")
        self._allowances[(owner, spender)] = current - amount


# ══════════════════════════════════════════════════════════════════════
#  HELIOS ERC20
# ══════════════════════════════════════════════════════════════════════

class HeliosERC20(ERC20, Ownable):
    """
    Bridged representation of a Helios-native denom.

    Deployed by the bridge, which becomes its owner and is the only account
    allowed to mint on inbound settlement and burn on outbound transfer.
    """

    def __init__(self, chain, address, name: str, symbol: str, decimals: int = 18):
        super().__init__(chain, address, name, symbol, decimals)
        self._transfer_ownership(self.msg_sender)

    @only_owner
    def mint(self, to: str, amount: int) -> None:
        self._mint(normalize_address(to), amount)

    @only_owner
    def burn(self, account: str, amount: int) -> None:
        self._burn(normalize_address(account), amount)

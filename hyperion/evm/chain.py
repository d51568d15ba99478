"""
Simulated EVM Chain

A deterministic, single-threaded execution environment for the bridge
contracts:
- block height and timestamp under explicit control
- CREATE-style contract addresses from (deployer, nonce)
- atomic transactions: any exception rolls back every state change
- nested message calls with a msg.sender stack
- an append-only event log
"""

from typing import Any, Callable, Dict, List, Optional, Set, Type, TypeVar

from .contract import Contract
from .events import Event, Log, Receipt
from .state import StateManager
from ..constants import BLOCK_TIME, DEFAULT_CHAIN_ID, GENESIS_TIMESTAMP, ZERO_ADDRESS
from ..crypto.address import generate_contract_address, to_checksum_address
from ..exceptions import Revert
from ..logger import get_logger

logger = get_logger(__name__)

C = TypeVar("C", bound=Contract)


class Chain:
    """
    In-process chain hosting contracts.

    Example:
        chain = Chain()
        token = chain.deploy(deployer, HeliosERC20, "Wrapped", "WRP", 18)
        receipt = chain.transact(deployer, token.mint, alice, 1000)
    """

    def __init__(
        self,
        chain_id: int = DEFAULT_CHAIN_ID,
        block_number: int = 1,
        timestamp: int = GENESIS_TIMESTAMP,
        block_time: int = BLOCK_TIME,
    ):
        self.chain_id = chain_id
        self.block_time = block_time
        self._block_number = block_number
        self._timestamp = timestamp

        self._contracts: Dict[str, Contract] = {}
        self._nonces: Dict[str, int] = {}
        self._logs: List[Log] = []

        self._call_stack: List[str] = []
        self._constructing: Set[str] = set()
        self._tx_count = 0
        self._current_tx: Optional[int] = None

        self.state = StateManager(self)

    # ══════════════════════════════════════════════════════════════════
    #  BLOCKS AND TIME
    # ══════════════════════════════════════════════════════════════════

    @property
    def block_number(self) -> int:
        return self._block_number

    @property
    def timestamp(self) -> int:
        return self._timestamp

    def mine(self, blocks: int = 1) -> int:
        """Advance *blocks* blocks, moving the clock by block_time each."""
        if blocks < 0:
            raise ValueError("Cannot mine a negative number of blocks")
        self._block_number += blocks
        self._timestamp += blocks * self.block_time
        return self._block_number

    def mine_to(self, block_number: int) -> int:
        if block_number < self._block_number:
            raise ValueError(f"Block {block_number} is in the past (current {self._block_number})")
        return self.mine(block_number - self._block_number)

    def advance_time(self, seconds: int) -> int:
        """Move the clock forward without producing blocks."""
        if seconds < 0:
            raise ValueError("Time only moves forward")
        self._timestamp += seconds
        return self._timestamp

    # ══════════════════════════════════════════════════════════════════
    #  ACCOUNTS
    # ══════════════════════════════════════════════════════════════════

    def get_nonce(self, address: str) -> int:
        return self._nonces.get(to_checksum_address(address), 0)

    def has_code(self, address: str) -> bool:
        return to_checksum_address(address) in self._contracts

    def is_constructing(self, address: str) -> bool:
        return to_checksum_address(address) in self._constructing

    def get_contract(self, address: str) -> Contract:
        contract = self._contracts.get(to_checksum_address(address))
        if contract is None:
            raise KeyError(f"No contract at {address}")
        return contract

    def _bump_nonce(self, address: str) -> int:
        nonce = self._nonces.get(address, 0)
        self._nonces[address] = nonce + 1
        return nonce

    # ══════════════════════════════════════════════════════════════════
    #  EXECUTION
    # ══════════════════════════════════════════════════════════════════

    @property
    def msg_sender(self) -> str:
        if not self._call_stack:
            raise RuntimeError("msg.sender is only defined inside a call")
        return self._call_stack[-1]

    @property
    def in_transaction(self) -> bool:
        return self._current_tx is not None

    def deploy(self, deployer: str, contract_cls: Type[C], *args: Any, **kwargs: Any) -> C:
        """
        Deploy *contract_cls*; the constructor runs with msg.sender = deployer.

        At top level this is its own transaction. From inside a call it acts
        like the CREATE opcode, using the calling contract's nonce.

        Returns:
            The deployed contract
        """
        deployer = to_checksum_address(deployer)
        if self._call_stack:
            return self._create(deployer, self._bump_nonce(deployer), contract_cls, args, kwargs)

        nonce = self.get_nonce(deployer)
        receipt = self._run_transaction(
            deployer,
            lambda: self._create(deployer, nonce, contract_cls, args, kwargs),
            f"deploy {contract_cls.__name__}",
        )
        return receipt.return_value

    def _create(self, deployer: str, nonce: int, contract_cls: Type[C], args, kwargs) -> C:
        address = generate_contract_address(deployer, nonce)
        if address in self._contracts:
            raise Revert(f"Contract already deployed at {address}")

        # No code at the address until the constructor returns
        self._constructing.add(address)
        self._nonces[address] = 1
        self._call_stack.append(deployer)
        try:
            contract = contract_cls(self, address, *args, **kwargs)
        finally:
            self._call_stack.pop()
            self._constructing.discard(address)
        self._contracts[address] = contract

        logger.debug(f"Deployed {contract_cls.__name__} at {address} (deployer={deployer}, nonce={nonce})")
        return contract

    def transact(self, sender: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Receipt:
        """
        Send a transaction calling the bound contract method *fn*.

        Either every state change and event of the call is kept, or (on any
        exception) none is and the exception propagates.

        Returns:
            Receipt with the method's return value and emitted logs
        """
        contract = getattr(fn, '__self__', None)
        if not isinstance(contract, Contract) or self._contracts.get(contract.address) is not contract:
            raise ValueError("transact() needs a method of a contract deployed on this chain")
        if fn.__name__.startswith('_'):
            raise ValueError(f"{fn.__name__} is not an external function")

        sender = to_checksum_address(sender)
        return self._run_transaction(
            sender,
            lambda: fn(*args, **kwargs),
            f"{type(contract).__name__}.{fn.__name__}",
        )

    def _run_transaction(self, sender: str, body: Callable[[], Any], label: str) -> Receipt:
        if self._call_stack:
            raise RuntimeError("Transactions cannot be sent from inside a call")

        self._bump_nonce(sender)
        tx_index = self._tx_count
        self._tx_count += 1
        log_start = len(self._logs)

        snapshot_id = self.state.snapshot()
        self._current_tx = tx_index
        self._call_stack.append(sender)
        try:
            result = body()
        except Exception as e:
            self.state.revert(snapshot_id)
            logger.debug(f"Transaction {tx_index} ({label}) from {sender} reverted: {e}")
            raise
        else:
            self.state.commit(snapshot_id)
        finally:
            self._call_stack.pop()
            self._current_tx = None

        logs = self._logs[log_start:]
        logger.debug(f"Transaction {tx_index} ({label}) from {sender} succeeded with {len(logs)} log(s)")
        return Receipt(
            tx_index=tx_index,
            block_number=self._block_number,
            sender=sender,
            return_value=result,
            logs=list(logs),
        )

    def call(self, sender: str, target: str, method: str, *args: Any) -> Any:
        """
        Message call from *sender* into the contract at *target*.

        A failing callee unwinds its own changes before the exception
        reaches the caller, so a caller that catches it continues from a
        consistent state.
        """
        contract = self._contracts.get(to_checksum_address(target))
        if contract is None:
            raise Revert("Address: call to non-contract")
        fn = getattr(contract, method, None)
        if method.startswith('_') or not callable(fn):
            raise Revert(f"{type(contract).__name__}: function {method} not found")

        snapshot_id = self.state.snapshot()
        self._call_stack.append(to_checksum_address(sender))
        try:
            result = fn(*args)
        except Exception:
            self.state.revert(snapshot_id)
            raise
        else:
            self.state.commit(snapshot_id)
        finally:
            self._call_stack.pop()
        return result

    def view(self, fn: Callable[..., Any], *args: Any, sender: str = ZERO_ADDRESS) -> Any:
        """Run *fn* like eth_call: its effects are always discarded."""
        snapshot_id = self.state.snapshot()
        self._call_stack.append(to_checksum_address(sender))
        try:
            return fn(*args)
        finally:
            self._call_stack.pop()
            self.state.revert(snapshot_id)

    # ══════════════════════════════════════════════════════════════════
    #  LOGS
    # ══════════════════════════════════════════════════════════════════

    def emit(self, address: str, event: Event) -> Log:
        if self._current_tx is None:
            raise RuntimeError("Events can only be emitted inside a transaction")
        log = Log(
            address=address,
            event=event,
            block_number=self._block_number,
            tx_index=self._current_tx,
            log_index=len(self._logs),
        )
        self._logs.append(log)
        return log

    def get_logs(
        self,
        event_type: Optional[Type[Event]] = None,
        address: Optional[str] = None,
        from_block: Optional[int] = None,
        to_block: Optional[int] = None,
    ) -> List[Log]:
        """Filter the committed log like eth_getLogs."""
        if address is not None:
            address = to_checksum_address(address)
        return [
            log for log in self._logs
            if (event_type is None or isinstance(log.event, event_type))
            and (address is None or log.address == address)
            and (from_block is None or log.block_number >= from_block)
            and (to_block is None or log.block_number <= to_block)
        ]

    def get_events(self, event_type: Type[Event], address: Optional[str] = None) -> List[Event]:
        return [log.event for log in self.get_logs(event_type, address)]

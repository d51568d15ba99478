"""
Hyperion Bridge Contract

The on-chain half of the Helios <-> Ethereum bridge:
  - validator-set commitment and rotation (update_valset)
  - inbound batch settlement with relayer fees (submit_batch)
  - outbound lock/burn with event emission (send_to_helios)
  - bridged ERC-20 factory for Helios-native denoms (deploy_erc20)
  - pause, ownership transfer and time-bounded ownership

The validator set itself is never stored, only its checkpoint. Every caller
presents the current set and the contract recomputes the digest.
"""

from typing import Dict, Sequence, Union

from ..constants import NONCE_JUMP_LIMIT, ZERO_ADDRESS, ZERO_BYTES32
from ..crypto.address import is_zero_address, normalize_address
from ..evm.contract import check_uint256
from ..exceptions import (
    ConsistencyError,
    InsufficientPowerError,
    ReplayError,
    Revert,
)
from ..lifecycle import (
    ExpiringOwnable,
    Initializable,
    Pausable,
    ReentrancyGuard,
    initializer,
    non_reentrant,
    only_owner,
    only_owner_before_expiry,
    when_not_paused,
)
from ..logger import get_logger
from ..tokens.erc20 import HeliosERC20
from ..tokens.safe_erc20 import balance_of, safe_transfer, safe_transfer_from
from .checkpoint import (
    batch_invalidation_key,
    check_validator_signatures,
    make_batch_digest,
    make_checkpoint,
    to_bytes32,
    validate_signature_arrays,
)
from .types import (
    ERC20DeployedEvent,
    SendToHeliosEvent,
    ValsetArgs,
    ValsetUpdatedEvent,
    TransactionBatchExecutedEvent,
)

logger = get_logger(__name__)


class Hyperion(Initializable, ExpiringOwnable, Pausable, ReentrancyGuard):
    """
    Hyperion bridge core.

    Deploy, then call ``initialize`` once, or pass the initialize arguments
    to the constructor to do both in one transaction.
    """

    def __init__(
        self,
        chain,
        address,
        hyperion_id: Union[bytes, str, None] = None,
        power_threshold: int = 0,
        validators: Sequence[str] = (),
        powers: Sequence[int] = (),
    ):
        super().__init__(chain, address)
        self._hyperion_id = ZERO_BYTES32
        self._power_threshold = 0
        self._last_valset_checkpoint = ZERO_BYTES32
        self._last_valset_nonce = 0
        self._last_event_nonce = 0
        self._last_event_height = 0
        self._last_valset_height = 0
        self._last_batch_nonces: Dict[str, int] = {}
        self._invalidation_mapping: Dict[bytes, int] = {}
        self._helios_native_tokens: Dict[str, bool] = {}
        self._registered_tokens: Dict[str, bool] = {}

        if hyperion_id is not None:
            self.initialize(hyperion_id, power_threshold, validators, powers)

    # ══════════════════════════════════════════════════════════════════
    #  VIEWS
    # ══════════════════════════════════════════════════════════════════

    def state_hyperion_id(self) -> bytes:
        return self._hyperion_id

    def state_power_threshold(self) -> int:
        return self._power_threshold

    def state_last_valset_checkpoint(self) -> bytes:
        return self._last_valset_checkpoint

    def state_last_valset_nonce(self) -> int:
        return self._last_valset_nonce

    def state_last_event_nonce(self) -> int:
        return self._last_event_nonce

    def state_last_event_height(self) -> int:
        return self._last_event_height

    def state_last_valset_height(self) -> int:
        return self._last_valset_height

    def state_last_batch_nonces(self, token_contract: str) -> int:
        return self._last_batch_nonces.get(normalize_address(token_contract), 0)

    def last_batch_nonce(self, token_contract: str) -> int:
        return self.state_last_batch_nonces(token_contract)

    def state_invalidation_mapping(self, key: bytes) -> int:
        return self._invalidation_mapping.get(bytes(key), 0)

    def is_helios_native_token(self, token_contract: str) -> bool:
        return self._helios_native_tokens.get(normalize_address(token_contract), False)

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    @initializer
    def initialize(
        self,
        hyperion_id: Union[bytes, str],
        power_threshold: int,
        validators: Sequence[str],
        powers: Sequence[int],
    ) -> None:
        """
        Bind the domain separator, threshold and genesis validator set.

        The caller becomes owner for OWNERSHIP_EXPIRY_DURATION seconds.
        """
        hyperion_id = to_bytes32(hyperion_id, "hyperionId")
        check_uint256(power_threshold, "powerThreshold")
        valset = ValsetArgs(list(validators), list(powers), 0, 0, ZERO_ADDRESS)
        if not valset.is_well_formed():
            raise ConsistencyError("Malformed current validator set")
        if valset.total_power() < power_threshold:
            raise InsufficientPowerError("Submitted validator set signatures do not have enough power.")

        self._hyperion_id = hyperion_id
        self._power_threshold = power_threshold
        self._last_valset_checkpoint = make_checkpoint(valset, hyperion_id)
        self._last_valset_nonce = 0
        self._last_event_nonce = 0
        self._last_valset_height = self.block_number
        self._last_event_height = self.block_number

        self._transfer_ownership(self.msg_sender)
        self._start_ownership_window()

        self.emit(ValsetUpdatedEvent(
            new_valset_nonce=0,
            event_nonce=0,
            reward_amount=0,
            reward_token=ZERO_ADDRESS,
            validators=tuple(valset.validators),
            powers=tuple(valset.powers),
        ))
        logger.info(
            f"Hyperion {self.address} initialized: hyperion_id=0x{hyperion_id.hex()} "
            f"threshold={power_threshold} validators={len(valset.validators)}"
        )

    @only_owner
    def emergency_pause(self) -> None:
        self._pause()

    @only_owner
    def emergency_unpause(self) -> None:
        self._unpause()

    # ══════════════════════════════════════════════════════════════════
    #  VALIDATOR SET
    # ══════════════════════════════════════════════════════════════════

    def _require_current_valset(self, current_valset: ValsetArgs) -> None:
        if make_checkpoint(current_valset, self._hyperion_id) != self._last_valset_checkpoint:
            raise ConsistencyError("Supplied current validators and powers do not match checkpoint.")

    def _bump_event_nonce(self) -> int:
        self._last_event_nonce += 1
        self._last_event_height = self.block_number
        return self._last_event_nonce

    @when_not_paused
    @non_reentrant
    def update_valset(
        self,
        new_valset: ValsetArgs,
        current_valset: ValsetArgs,
        v: Sequence[int],
        r: Sequence[bytes],
        s: Sequence[bytes],
    ) -> None:
        """
        Replace the committed validator set.

        The current set must sign the new set's checkpoint with at least the
        power threshold. A non-zero reward goes to the relayer (msg.sender).
        """
        if new_valset.valset_nonce <= current_valset.valset_nonce:
            raise ReplayError("New valset nonce must be greater than the current nonce")
        if new_valset.valset_nonce - current_valset.valset_nonce >= NONCE_JUMP_LIMIT:
            raise ReplayError("New valset nonce must be less than 10^15 greater than the current nonce")
        if not new_valset.is_well_formed():
            raise ConsistencyError("Malformed new validator set")
        validate_signature_arrays(current_valset, v, r, s)
        self._require_current_valset(current_valset)
        if new_valset.total_power() < self._power_threshold:
            raise InsufficientPowerError("Submitted validator set signatures do not have enough power.")

        new_checkpoint = make_checkpoint(new_valset, self._hyperion_id)
        check_validator_signatures(current_valset, v, r, s, new_checkpoint, self._power_threshold)

        self._last_valset_checkpoint = new_checkpoint
        self._last_valset_nonce = new_valset.valset_nonce
        self._last_valset_height = self.block_number
        event_nonce = self._bump_event_nonce()

        self.emit(ValsetUpdatedEvent(
            new_valset_nonce=new_valset.valset_nonce,
            event_nonce=event_nonce,
            reward_amount=new_valset.reward_amount,
            reward_token=new_valset.reward_token,
            validators=tuple(new_valset.validators),
            powers=tuple(new_valset.powers),
        ))
        logger.info(
            f"Valset updated: valset_nonce={new_valset.valset_nonce} event_nonce={event_nonce} "
            f"checkpoint=0x{new_checkpoint.hex()}"
        )

        if new_valset.reward_amount > 0 and not is_zero_address(new_valset.reward_token):
            self._release(new_valset.reward_token, self.msg_sender, new_valset.reward_amount)
            logger.debug(f"Valset reward {new_valset.reward_amount} of {new_valset.reward_token} to {self.msg_sender}")

    # ══════════════════════════════════════════════════════════════════
    #  INBOUND
    # ══════════════════════════════════════════════════════════════════

    def _release(self, token_contract: str, to: str, amount: int) -> None:
        """Pay out of the bridge: mint native tokens, transfer from the vault otherwise."""
        if self.is_helios_native_token(token_contract):
            self.call(token_contract, "mint", to, amount)
        else:
            safe_transfer(self, token_contract, to, amount)

    @when_not_paused
    @non_reentrant
    def submit_batch(
        self,
        current_valset: ValsetArgs,
        v: Sequence[int],
        r: Sequence[bytes],
        s: Sequence[bytes],
        amounts: Sequence[int],
        destinations: Sequence[str],
        fees: Sequence[int],
        batch_nonce: int,
        token_contract: str,
        batch_timeout: int,
    ) -> None:
        """
        Execute a batch of payouts signed by the current validator set.

        Each destination receives its amount and the caller collects every
        fee. The batch is inert once ``batch_timeout`` is reached.
        """
        token_contract = normalize_address(token_contract)
        last_nonce = self._last_batch_nonces.get(token_contract, 0)
        if batch_nonce <= last_nonce:
            raise ReplayError("New batch nonce must be greater than the current nonce")
        if batch_nonce - last_nonce >= NONCE_JUMP_LIMIT:
            raise ReplayError("New batch nonce must be less than 10^15 greater than the current nonce")
        if batch_timeout <= self.block_number:
            raise ReplayError("Batch timeout must be greater than the current block height")
        validate_signature_arrays(current_valset, v, r, s)
        self._require_current_valset(current_valset)
        if not (len(amounts) == len(destinations) == len(fees)):
            raise ConsistencyError("Malformed batch of transactions")

        destinations = [normalize_address(d) for d in destinations]
        digest = make_batch_digest(
            self._hyperion_id, amounts, destinations, fees,
            batch_nonce, token_contract, batch_timeout,
        )
        check_validator_signatures(current_valset, v, r, s, digest, self._power_threshold)

        self._last_batch_nonces[token_contract] = batch_nonce
        self._invalidation_mapping[batch_invalidation_key(token_contract)] = batch_nonce

        relayer = self.msg_sender
        total_fees = 0
        for amount, destination, fee in zip(amounts, destinations, fees):
            self._release(token_contract, destination, amount)
            if fee > 0:
                self._release(token_contract, relayer, fee)
                total_fees += fee

        event_nonce = self._bump_event_nonce()
        self.emit(TransactionBatchExecutedEvent(
            batch_nonce=batch_nonce,
            token=token_contract,
            event_nonce=event_nonce,
        ))
        logger.info(
            f"Batch executed: token={token_contract} batch_nonce={batch_nonce} "
            f"event_nonce={event_nonce} txs={len(amounts)} fees={total_fees}"
        )

    # ══════════════════════════════════════════════════════════════════
    #  OUTBOUND
    # ══════════════════════════════════════════════════════════════════

    def _deposit(self, token_contract: str, destination: Union[bytes, str], amount: int):
        """
        Take *amount* from the caller: burn it if native, lock it otherwise.

        Returns:
            (token, destination, received amount, event nonce)
        """
        token_contract = normalize_address(token_contract)
        destination = to_bytes32(destination, "destination")
        check_uint256(amount, "amount")
        sender = self.msg_sender

        first_deposit = False
        if self.is_helios_native_token(token_contract):
            self.call(token_contract, "burn", sender, amount)
            received = amount
        else:
            # Fee-on-transfer tokens deliver less than requested
            balance_before = balance_of(self, token_contract, self.address)
            safe_transfer_from(self, token_contract, sender, self.address, amount)
            received = balance_of(self, token_contract, self.address) - balance_before
            first_deposit = not self._registered_tokens.get(token_contract, False)

        if first_deposit:
            self._registered_tokens[token_contract] = True
            self._emit_token_metadata(token_contract, self._bump_event_nonce())
        event_nonce = self._bump_event_nonce()

        logger.info(
            f"Deposit: token={token_contract} sender={sender} amount={received} event_nonce={event_nonce}"
        )
        return token_contract, destination, received, event_nonce

    def _read_metadata(self, token_contract: str, method: str, default):
        try:
            return self.call(token_contract, method)
        except Revert as e:
            logger.debug(f"Token {token_contract} has no {method}(): {e.reason}")
            return default

    def _emit_token_metadata(self, token_contract: str, event_nonce: int) -> None:
        self.emit(ERC20DeployedEvent(
            cosmos_denom="",
            token_contract=token_contract,
            name=self._read_metadata(token_contract, "name", ""),
            symbol=self._read_metadata(token_contract, "symbol", ""),
            decimals=self._read_metadata(token_contract, "decimals", 0),
            event_nonce=event_nonce,
        ))

    @when_not_paused
    @non_reentrant
    def send_to_helios(
        self,
        token_contract: str,
        destination: Union[bytes, str],
        amount: int,
        data: str = "",
    ) -> int:
        """
        Send tokens to a Helios account.

        Returns:
            The amount actually received and reported
        """
        token_contract, destination, received, event_nonce = self._deposit(
            token_contract, destination, amount
        )
        self.emit(SendToHeliosEvent(
            token_contract=token_contract,
            sender=self.msg_sender,
            destination=destination,
            amount=received,
            event_nonce=event_nonce,
            data=data,
        ))
        return received

    # ══════════════════════════════════════════════════════════════════
    #  FACTORY
    # ══════════════════════════════════════════════════════════════════

    def _deploy_erc20(self, cosmos_denom: str, name: str, symbol: str, decimals: int, supply: int) -> str:
        check_uint256(supply, "supply")
        token = self.chain.deploy(self.address, HeliosERC20, name, symbol, decimals)
        self._helios_native_tokens[token.address] = True

        event_nonce = self._bump_event_nonce()
        self.emit(ERC20DeployedEvent(
            cosmos_denom=cosmos_denom,
            token_contract=token.address,
            name=name,
            symbol=symbol,
            decimals=decimals,
            event_nonce=event_nonce,
        ))
        if supply > 0:
            self.call(token.address, "mint", self.msg_sender, supply)

        logger.info(
            f"Deployed bridged ERC20 {symbol} for denom {cosmos_denom!r} at {token.address} "
            f"event_nonce={event_nonce}"
        )
        return token.address

    @non_reentrant
    @only_owner_before_expiry
    def deploy_erc20(self, cosmos_denom: str, name: str, symbol: str, decimals: int) -> str:
        return self._deploy_erc20(cosmos_denom, name, symbol, decimals, 0)

    @non_reentrant
    @only_owner_before_expiry
    def deploy_erc20_with_supply(
        self, cosmos_denom: str, name: str, symbol: str, decimals: int, supply: int
    ) -> str:
        """Same as deploy_erc20, then mints *supply* to the caller."""
        return self._deploy_erc20(cosmos_denom, name, symbol, decimals, supply)

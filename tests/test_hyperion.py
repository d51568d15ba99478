"""
Hyperion Bridge Test Suite

Coverage:
  - bootstrap and one-shot initialization
  - validator set rotation, rewards and replay protection
  - batch settlement: payouts, relayer fees, timeouts, nonce bounds
  - outbound deposits: lock vs burn, fee-on-transfer tokens, metadata
  - bridged ERC-20 factory
  - pause, ownership and ownership expiry
  - re-entrancy through hostile tokens
  - global invariants over a mixed run
"""

import pytest

from hyperion.bridge import (
    ERC20DeployedEvent,
    Hyperion,
    OwnershipTransferred,
    Paused,
    SendToCosmosEvent,
    SendToHeliosEvent,
    TransactionBatchExecutedEvent,
    Unpaused,
    ValsetUpdatedEvent,
    batch_invalidation_key,
    make_batch_digest,
    make_checkpoint,
)
from hyperion.constants import NONCE_JUMP_LIMIT, OWNERSHIP_EXPIRY_DURATION, ZERO_ADDRESS
from hyperion.exceptions import (
    AuthorizationError,
    ConsistencyError,
    InsufficientPowerError,
    InvalidSignatureError,
    InvalidValueError,
    LifecycleError,
    ReentrancyError,
    ReplayError,
    Revert,
    TokenError,
)
from hyperion.tokens import HeliosERC20, Transfer

from bridge_helpers import (
    DEPLOYER,
    DEST_X,
    DEST_Y,
    GENESIS_POWERS,
    GENESIS_VALIDATORS,
    HELIOS_DEST,
    HYPERION_ID,
    KEY_A,
    KEY_B,
    KEY_C,
    KEY_D,
    KEY_E,
    POWER_THRESHOLD,
    RELAYER,
    STRANGER,
    USER,
    VAL_A,
    VAL_D,
    VAL_E,
    FeeOnTransferToken,
    MockERC20,
    NoMetadataToken,
    ReentrantToken,
    make_valset,
    sign_with,
)

GENESIS = make_valset()
ROTATED = make_valset([VAL_A, VAL_D, VAL_E], [100, 150, 50], nonce=1)


# ══════════════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════════════

def update(chain, bridge, new, current=GENESIS, signers=(KEY_A, KEY_B, KEY_C), sender=RELAYER):
    v, r, s = sign_with(make_checkpoint(new, HYPERION_ID), current, signers)
    return chain.transact(sender, bridge.update_valset, new, current, v, r, s)


def submit(
    chain, bridge, token, amounts, destinations, fees, batch_nonce,
    timeout=None, current=GENESIS, signers=(KEY_A, KEY_B), sender=RELAYER,
):
    if timeout is None:
        timeout = chain.block_number + 100
    digest = make_batch_digest(HYPERION_ID, amounts, destinations, fees, batch_nonce, token, timeout)
    v, r, s = sign_with(digest, current, signers)
    return chain.transact(
        sender, bridge.submit_batch,
        current, v, r, s, amounts, destinations, fees, batch_nonce, token, timeout,
    )


def deposit(chain, bridge, token, amount, sender=USER, data=""):
    chain.transact(sender, token.approve, bridge.address, amount)
    return chain.transact(sender, bridge.send_to_helios, token.address, HELIOS_DEST, amount, data)


# ══════════════════════════════════════════════════════════════════════
#  INITIALIZATION
# ══════════════════════════════════════════════════════════════════════

class TestInitialize:

    def test_bootstrap(self, bridge):
        assert bridge.state_last_valset_checkpoint() == make_checkpoint(GENESIS, HYPERION_ID)
        assert bridge.state_hyperion_id() == HYPERION_ID
        assert bridge.state_power_threshold() == POWER_THRESHOLD
        assert bridge.state_last_valset_nonce() == 0
        assert bridge.state_last_event_nonce() == 0
        assert bridge.owner() == DEPLOYER
        assert not bridge.paused()

    def test_bootstrap_events(self, chain, bridge):
        assert chain.get_events(OwnershipTransferred, bridge.address) == [
            OwnershipTransferred(previous_owner=ZERO_ADDRESS, new_owner=DEPLOYER)
        ]
        genesis = chain.get_events(ValsetUpdatedEvent, bridge.address)
        assert len(genesis) == 1
        assert genesis[0].event_nonce == 0
        assert genesis[0].to_valset() == GENESIS

    def test_ownership_window_starts(self, chain, bridge):
        assert bridge.get_ownership_expiry_timestamp() == chain.timestamp + OWNERSHIP_EXPIRY_DURATION
        assert not bridge.is_ownership_expired()

    def test_cannot_initialize_twice(self, chain, bridge):
        with pytest.raises(LifecycleError, match="already initialized"):
            chain.transact(
                DEPLOYER, bridge.initialize,
                HYPERION_ID, POWER_THRESHOLD, GENESIS_VALIDATORS, GENESIS_POWERS,
            )

    def test_initialize_as_separate_transaction(self, chain):
        bridge = chain.deploy(DEPLOYER, Hyperion)
        assert bridge.owner() == ZERO_ADDRESS
        chain.transact(USER, bridge.initialize, HYPERION_ID, POWER_THRESHOLD, GENESIS_VALIDATORS, GENESIS_POWERS)
        assert bridge.owner() == USER
        with pytest.raises(LifecycleError, match="already initialized"):
            chain.transact(USER, bridge.initialize, HYPERION_ID, POWER_THRESHOLD, GENESIS_VALIDATORS, GENESIS_POWERS)

    def test_hex_hyperion_id(self, chain):
        bridge = chain.deploy(
            DEPLOYER, Hyperion, "0x" + HYPERION_ID.hex(), POWER_THRESHOLD, GENESIS_VALIDATORS, GENESIS_POWERS
        )
        assert bridge.state_hyperion_id() == HYPERION_ID

    def test_threshold_above_total_power(self, chain):
        with pytest.raises(InsufficientPowerError, match="signatures do not have enough power"):
            chain.deploy(DEPLOYER, Hyperion, HYPERION_ID, 301, GENESIS_VALIDATORS, GENESIS_POWERS)

    def test_malformed_genesis(self, chain):
        with pytest.raises(ConsistencyError, match="Malformed current validator set"):
            chain.deploy(DEPLOYER, Hyperion, HYPERION_ID, POWER_THRESHOLD, GENESIS_VALIDATORS, [100, 100])

    def test_failed_initialize_can_be_retried(self, chain):
        bridge = chain.deploy(DEPLOYER, Hyperion)
        with pytest.raises(InsufficientPowerError):
            chain.transact(USER, bridge.initialize, HYPERION_ID, 999, GENESIS_VALIDATORS, GENESIS_POWERS)
        chain.transact(USER, bridge.initialize, HYPERION_ID, POWER_THRESHOLD, GENESIS_VALIDATORS, GENESIS_POWERS)
        assert bridge.state_power_threshold() == POWER_THRESHOLD


# ══════════════════════════════════════════════════════════════════════
#  VALIDATOR SET UPDATES
# ══════════════════════════════════════════════════════════════════════

class TestUpdateValset:

    def test_rotation(self, chain, bridge):
        chain.mine(3)
        receipt = update(chain, bridge, ROTATED)
        assert bridge.state_last_valset_checkpoint() == make_checkpoint(ROTATED, HYPERION_ID)
        assert bridge.state_last_valset_nonce() == 1
        assert bridge.state_last_event_nonce() == 1
        assert bridge.state_last_valset_height() == chain.block_number

        event = receipt.event(ValsetUpdatedEvent)
        assert event.new_valset_nonce == 1
        assert event.event_nonce == 1
        assert event.validators == (VAL_A, VAL_D, VAL_E)
        assert event.powers == (100, 150, 50)

    def test_old_set_rejected_after_rotation(self, chain, bridge, token):
        update(chain, bridge, ROTATED)
        with pytest.raises(ConsistencyError, match="do not match checkpoint"):
            submit(chain, bridge, token.address, [1], [DEST_X], [0], 1)

    def test_new_set_signs_next_update(self, chain, bridge):
        update(chain, bridge, ROTATED)
        nxt = make_valset(GENESIS_VALIDATORS, GENESIS_POWERS, nonce=2)
        update(chain, bridge, nxt, current=ROTATED, signers=(KEY_D, KEY_E))
        assert bridge.state_last_valset_nonce() == 2

    def test_same_update_twice(self, chain, bridge):
        update(chain, bridge, ROTATED)
        with pytest.raises(ReplayError, match="nonce must be greater"):
            update(chain, bridge, ROTATED, current=ROTATED, signers=(KEY_A, KEY_D))

    def test_nonce_jump_limit(self, chain, bridge):
        too_far = make_valset(nonce=NONCE_JUMP_LIMIT)
        with pytest.raises(ReplayError, match="10\\^15"):
            update(chain, bridge, too_far)
        update(chain, bridge, make_valset(nonce=NONCE_JUMP_LIMIT - 1))
        assert bridge.state_last_valset_nonce() == NONCE_JUMP_LIMIT - 1

    def test_malformed_new_set(self, chain, bridge):
        bad = make_valset([VAL_A, VAL_D], [100, 150, 50], nonce=1)
        with pytest.raises(ConsistencyError, match="Malformed new validator set"):
            update(chain, bridge, bad)

    def test_current_set_must_match_checkpoint(self, chain, bridge):
        lying = make_valset(powers=[300, 100, 100])
        with pytest.raises(ConsistencyError, match="do not match checkpoint"):
            update(chain, bridge, ROTATED, current=lying)

    def test_signature_arrays_must_match_set(self, chain, bridge):
        v, r, s = sign_with(make_checkpoint(ROTATED, HYPERION_ID), GENESIS, (KEY_A, KEY_B))
        with pytest.raises(ConsistencyError, match="Malformed current validator set"):
            chain.transact(RELAYER, bridge.update_valset, ROTATED, GENESIS, v[:2], r, s)

    def test_new_set_below_threshold(self, chain, bridge):
        weak = make_valset([VAL_D, VAL_E], [100, 50], nonce=1)
        with pytest.raises(InsufficientPowerError, match="Submitted validator set signatures do not have enough power"):
            update(chain, bridge, weak)

    def test_insufficient_signatures(self, chain, bridge):
        with pytest.raises(InsufficientPowerError, match="signatures do not have enough power"):
            update(chain, bridge, ROTATED, signers=(KEY_C,))
        assert bridge.state_last_valset_checkpoint() == make_checkpoint(GENESIS, HYPERION_ID)

    def test_forged_signature(self, chain, bridge):
        v, r, s = sign_with(make_checkpoint(ROTATED, HYPERION_ID), GENESIS, (KEY_A, KEY_B))
        # D signs in B's slot
        forged = sign_with(make_checkpoint(ROTATED, HYPERION_ID), make_valset([VAL_D]), (KEY_D,))
        v[1], r[1], s[1] = forged[0][0], forged[1][0], forged[2][0]
        with pytest.raises(InvalidSignatureError, match="does not match"):
            chain.transact(RELAYER, bridge.update_valset, ROTATED, GENESIS, v, r, s)

    def test_reward_paid_to_relayer(self, chain, bridge, token):
        deposit(chain, bridge, token, 1_000)
        rewarded = make_valset([VAL_A, VAL_D, VAL_E], [100, 150, 50], nonce=1,
                               reward_amount=25, reward_token=token.address)
        receipt = update(chain, bridge, rewarded)
        assert token.balance_of(RELAYER) == 25
        assert token.balance_of(bridge.address) == 975
        event = receipt.event(ValsetUpdatedEvent)
        assert event.reward_amount == 25
        assert event.reward_token == token.address

    def test_reward_without_funds_reverts_update(self, chain, bridge, token):
        rewarded = make_valset(nonce=1, reward_amount=25, reward_token=token.address)
        with pytest.raises(TokenError, match="exceeds balance"):
            update(chain, bridge, rewarded)
        assert bridge.state_last_valset_nonce() == 0
        assert bridge.state_last_event_nonce() == 0


# ══════════════════════════════════════════════════════════════════════
#  BATCH SETTLEMENT
# ══════════════════════════════════════════════════════════════════════

class TestSubmitBatch:

    def test_settlement(self, chain, bridge, token):
        deposit(chain, bridge, token, 1_000)
        receipt = submit(chain, bridge, token.address, [400, 100], [DEST_X, DEST_Y], [10, 5], 1)

        assert token.balance_of(DEST_X) == 400
        assert token.balance_of(DEST_Y) == 100
        assert token.balance_of(RELAYER) == 15
        assert token.balance_of(bridge.address) == 485
        assert bridge.state_last_batch_nonces(token.address) == 1
        assert bridge.last_batch_nonce(token.address) == 1
        assert bridge.state_invalidation_mapping(batch_invalidation_key(token.address)) == 1

        event = receipt.event(TransactionBatchExecutedEvent)
        assert event == TransactionBatchExecutedEvent(batch_nonce=1, token=token.address, event_nonce=3)

    def test_replay_rejected(self, chain, bridge, token):
        deposit(chain, bridge, token, 1_000)
        timeout = chain.block_number + 50
        submit(chain, bridge, token.address, [10], [DEST_X], [1], 1, timeout=timeout)
        with pytest.raises(ReplayError, match="nonce must be greater"):
            submit(chain, bridge, token.address, [10], [DEST_X], [1], 1, timeout=timeout)
        assert token.balance_of(DEST_X) == 10

    def test_timeout_boundary(self, chain, bridge, token):
        deposit(chain, bridge, token, 1_000)
        chain.mine(10)
        with pytest.raises(ReplayError, match="Batch timeout"):
            submit(chain, bridge, token.address, [10], [DEST_X], [0], 1, timeout=chain.block_number)
        submit(chain, bridge, token.address, [10], [DEST_X], [0], 1, timeout=chain.block_number + 1)
        assert bridge.state_last_batch_nonces(token.address) == 1

    def test_expired_batch_is_inert(self, chain, bridge, token):
        deposit(chain, bridge, token, 1_000)
        timeout = chain.block_number + 5
        chain.mine(5)
        with pytest.raises(ReplayError, match="Batch timeout"):
            submit(chain, bridge, token.address, [10], [DEST_X], [0], 1, timeout=timeout)
        # The nonce is still free for a fresh batch
        submit(chain, bridge, token.address, [10], [DEST_X], [0], 1)

    def test_nonce_jump_limit(self, chain, bridge, token):
        deposit(chain, bridge, token, 1_000)
        with pytest.raises(ReplayError, match="10\\^15"):
            submit(chain, bridge, token.address, [10], [DEST_X], [0], NONCE_JUMP_LIMIT)
        submit(chain, bridge, token.address, [10], [DEST_X], [0], NONCE_JUMP_LIMIT - 1)

    def test_power_exactly_at_threshold(self, chain, token):
        bridge = chain.deploy(DEPLOYER, Hyperion, HYPERION_ID, 250, GENESIS_VALIDATORS, [150, 100, 50])
        deposit(chain, bridge, token, 1_000)
        current = make_valset(powers=[150, 100, 50])
        submit(chain, bridge, token.address, [10], [DEST_X], [0], 1, current=current, signers=(KEY_A, KEY_B))
        with pytest.raises(InsufficientPowerError):
            submit(chain, bridge, token.address, [10], [DEST_X], [0], 2, current=current, signers=(KEY_A, KEY_C))

    def test_malformed_batch(self, chain, bridge, token):
        with pytest.raises(ConsistencyError, match="Malformed batch of transactions"):
            submit(chain, bridge, token.address, [10, 20], [DEST_X], [0, 0], 1)

    def test_tampered_amount(self, chain, bridge, token):
        deposit(chain, bridge, token, 1_000)
        timeout = chain.block_number + 100
        digest = make_batch_digest(HYPERION_ID, [10], [DEST_X], [0], 1, token.address, timeout)
        v, r, s = sign_with(digest, GENESIS, (KEY_A, KEY_B))
        with pytest.raises(InvalidSignatureError):
            chain.transact(
                RELAYER, bridge.submit_batch,
                GENESIS, v, r, s, [999], [DEST_X], [0], 1, token.address, timeout,
            )

    def test_tokens_have_independent_nonces(self, chain, bridge, token):
        other = chain.deploy(DEPLOYER, MockERC20, "Other", "OTH")
        chain.transact(DEPLOYER, other.mint, USER, 1_000)
        deposit(chain, bridge, token, 500)
        deposit(chain, bridge, other, 500)

        submit(chain, bridge, token.address, [1], [DEST_X], [0], 5)
        submit(chain, bridge, other.address, [1], [DEST_X], [0], 1)
        assert bridge.state_last_batch_nonces(token.address) == 5
        assert bridge.state_last_batch_nonces(other.address) == 1

    def test_zero_fee_not_paid(self, chain, bridge, token):
        deposit(chain, bridge, token, 100)
        receipt = submit(chain, bridge, token.address, [30], [DEST_X], [0], 1)
        transfers = receipt.events(Transfer)
        assert [t.recipient for t in transfers] == [DEST_X]

    def test_underfunded_batch_reverts_atomically(self, chain, bridge, token):
        deposit(chain, bridge, token, 100)
        with pytest.raises(TokenError, match="exceeds balance"):
            submit(chain, bridge, token.address, [60, 60], [DEST_X, DEST_Y], [0, 0], 1)
        assert token.balance_of(DEST_X) == 0
        assert bridge.state_last_batch_nonces(token.address) == 0
        assert bridge.state_last_event_nonce() == 2

    def test_works_after_ownership_renounced(self, chain, bridge, token):
        chain.transact(DEPLOYER, bridge.renounce_ownership)
        deposit(chain, bridge, token, 100)
        submit(chain, bridge, token.address, [30], [DEST_X], [1], 1)
        update(chain, bridge, ROTATED)
        assert token.balance_of(DEST_X) == 30


# ══════════════════════════════════════════════════════════════════════
#  OUTBOUND
# ══════════════════════════════════════════════════════════════════════

class TestSendToHelios:

    def test_lock_non_native(self, chain, bridge, token):
        receipt = deposit(chain, bridge, token, 1_000, data="memo")
        assert token.balance_of(bridge.address) == 1_000
        assert receipt.return_value == 1_000
        assert receipt.event(SendToHeliosEvent) == SendToHeliosEvent(
            token_contract=token.address,
            sender=USER,
            destination=HELIOS_DEST,
            amount=1_000,
            event_nonce=2,
            data="memo",
        )
        assert bridge.state_last_event_nonce() == 2

    def test_first_deposit_announces_metadata(self, chain, bridge, token):
        first = deposit(chain, bridge, token, 10)
        assert first.event(ERC20DeployedEvent) == ERC20DeployedEvent(
            cosmos_denom="",
            token_contract=token.address,
            name="Mock Token",
            symbol="MOCK",
            decimals=18,
            event_nonce=1,
        )
        # Metadata precedes the deposit it belongs to, each with its own nonce
        announced = [e for e in first.events() if isinstance(e, (ERC20DeployedEvent, SendToHeliosEvent))]
        assert [type(e) for e in announced] == [ERC20DeployedEvent, SendToHeliosEvent]
        assert [e.event_nonce for e in announced] == [1, 2]
        assert bridge.state_last_event_nonce() == 2

        second = deposit(chain, bridge, token, 10)
        assert second.events(ERC20DeployedEvent) == []
        assert second.event(SendToHeliosEvent).event_nonce == 3

    def test_metadata_defaults(self, chain, bridge):
        token = chain.deploy(DEPLOYER, NoMetadataToken, "ignored", "IGN")
        chain.transact(DEPLOYER, token.mint, USER, 10)
        event = deposit(chain, bridge, token, 10).event(ERC20DeployedEvent)
        assert (event.name, event.symbol, event.decimals) == ("", "", 0)

    def test_fee_on_transfer_reports_received(self, chain, bridge):
        token = chain.deploy(DEPLOYER, FeeOnTransferToken, "Deflation", "DFL")
        chain.transact(DEPLOYER, token.mint, USER, 1_000)
        receipt = deposit(chain, bridge, token, 1_000)
        assert token.balance_of(bridge.address) == 990
        assert receipt.event(SendToHeliosEvent).amount == 990
        assert receipt.return_value == 990

    def test_requires_allowance(self, chain, bridge, token):
        with pytest.raises(TokenError, match="insufficient allowance"):
            chain.transact(USER, bridge.send_to_helios, token.address, HELIOS_DEST, 10)
        assert bridge.state_last_event_nonce() == 0

    def test_destination_must_be_32_bytes(self, chain, bridge, token):
        chain.transact(USER, token.approve, bridge.address, 10)
        with pytest.raises(InvalidValueError, match="32 bytes"):
            chain.transact(USER, bridge.send_to_helios, token.address, b"\xde\xad", 10)

    def test_non_contract_token(self, chain, bridge):
        with pytest.raises(Revert, match="non-contract"):
            chain.transact(USER, bridge.send_to_helios, STRANGER, HELIOS_DEST, 10)

    def test_subgraph_send_to_cosmos(self, chain, subgraph, token):
        chain.transact(USER, token.approve, subgraph.address, 300)
        receipt = chain.transact(USER, subgraph.send_to_cosmos, token.address, HELIOS_DEST, 300)
        assert receipt.event(SendToCosmosEvent) == SendToCosmosEvent(
            token_contract=token.address,
            sender=USER,
            destination=HELIOS_DEST,
            amount=300,
            event_nonce=2,
        )
        assert receipt.events(SendToHeliosEvent) == []
        # Both entry points share one nonce sequence
        second = deposit(chain, subgraph, token, 100)
        assert second.event(SendToHeliosEvent).event_nonce == 3

    def test_core_has_no_send_to_cosmos(self, bridge):
        assert not hasattr(bridge, "send_to_cosmos")


# ══════════════════════════════════════════════════════════════════════
#  FACTORY
# ══════════════════════════════════════════════════════════════════════

def _deploy_native(chain, bridge, supply=0):
    if supply:
        receipt = chain.transact(
            DEPLOYER, bridge.deploy_erc20_with_supply, "ahelios", "Helios", "HLS", 18, supply
        )
    else:
        receipt = chain.transact(DEPLOYER, bridge.deploy_erc20, "ahelios", "Helios", "HLS", 18)
    return chain.get_contract(receipt.return_value), receipt


class TestFactory:

    def test_deploy_erc20(self, chain, bridge):
        native, receipt = _deploy_native(chain, bridge)
        assert isinstance(native, HeliosERC20)
        assert native.owner() == bridge.address
        assert bridge.is_helios_native_token(native.address)
        assert receipt.event(ERC20DeployedEvent) == ERC20DeployedEvent(
            cosmos_denom="ahelios",
            token_contract=native.address,
            name="Helios",
            symbol="HLS",
            decimals=18,
            event_nonce=1,
        )
        assert native.total_supply() == 0

    def test_deploy_with_supply(self, chain, bridge):
        native, _ = _deploy_native(chain, bridge, supply=1_000)
        assert native.balance_of(DEPLOYER) == 1_000
        assert native.total_supply() == 1_000

    def test_only_owner(self, chain, bridge):
        with pytest.raises(AuthorizationError, match="caller is not the owner"):
            chain.transact(USER, bridge.deploy_erc20, "ahelios", "Helios", "HLS", 18)

    def test_expired_owner_cannot_deploy(self, chain, bridge):
        chain.advance_time(OWNERSHIP_EXPIRY_DURATION + 1)
        with pytest.raises(AuthorizationError, match="ownership expired"):
            chain.transact(DEPLOYER, bridge.deploy_erc20, "ahelios", "Helios", "HLS", 18)

    def test_outbound_burns_native(self, chain, bridge):
        native, _ = _deploy_native(chain, bridge, supply=1_000)
        receipt = chain.transact(DEPLOYER, bridge.send_to_helios, native.address, HELIOS_DEST, 400)
        assert native.total_supply() == 600
        assert native.balance_of(bridge.address) == 0
        assert receipt.event(SendToHeliosEvent).amount == 400
        # Native tokens are never announced on deposit
        assert receipt.events(ERC20DeployedEvent) == []

    def test_inbound_mints_native(self, chain, bridge):
        native, _ = _deploy_native(chain, bridge)
        submit(chain, bridge, native.address, [70, 30], [DEST_X, DEST_Y], [5, 5], 1)
        assert native.balance_of(DEST_X) == 70
        assert native.balance_of(RELAYER) == 10
        assert native.total_supply() == 110

    def test_native_supply_tracks_mints_minus_burns(self, chain, bridge):
        native, _ = _deploy_native(chain, bridge)
        submit(chain, bridge, native.address, [500], [USER], [20], 1)
        chain.transact(USER, bridge.send_to_helios, native.address, HELIOS_DEST, 200)
        submit(chain, bridge, native.address, [50], [DEST_X], [0], 2)
        assert native.total_supply() == 500 + 20 - 200 + 50


# ══════════════════════════════════════════════════════════════════════
#  PAUSE AND OWNERSHIP
# ══════════════════════════════════════════════════════════════════════

class TestPause:

    def test_pause_blocks_bridge_paths(self, chain, bridge, token):
        receipt = chain.transact(DEPLOYER, bridge.emergency_pause)
        assert receipt.event(Paused) == Paused(account=DEPLOYER)
        assert bridge.paused()

        chain.transact(USER, token.approve, bridge.address, 10)
        with pytest.raises(LifecycleError, match="Pausable: paused"):
            chain.transact(USER, bridge.send_to_helios, token.address, HELIOS_DEST, 10)
        with pytest.raises(LifecycleError, match="Pausable: paused"):
            submit(chain, bridge, token.address, [1], [DEST_X], [0], 1)
        with pytest.raises(LifecycleError, match="Pausable: paused"):
            update(chain, bridge, ROTATED)

    def test_unpause_restores(self, chain, bridge, token):
        chain.transact(DEPLOYER, bridge.emergency_pause)
        receipt = chain.transact(DEPLOYER, bridge.emergency_unpause)
        assert receipt.event(Unpaused) == Unpaused(account=DEPLOYER)
        deposit(chain, bridge, token, 10)
        assert token.balance_of(bridge.address) == 10

    def test_only_owner_pauses(self, chain, bridge):
        with pytest.raises(AuthorizationError):
            chain.transact(USER, bridge.emergency_pause)

    def test_double_pause(self, chain, bridge):
        with pytest.raises(LifecycleError, match="not paused"):
            chain.transact(DEPLOYER, bridge.emergency_unpause)
        chain.transact(DEPLOYER, bridge.emergency_pause)
        with pytest.raises(LifecycleError, match="Pausable: paused"):
            chain.transact(DEPLOYER, bridge.emergency_pause)


class TestOwnership:

    def test_transfer_ownership(self, chain, bridge):
        receipt = chain.transact(DEPLOYER, bridge.transfer_ownership, USER)
        assert bridge.owner() == USER
        assert receipt.event(OwnershipTransferred) == OwnershipTransferred(
            previous_owner=DEPLOYER, new_owner=USER
        )
        with pytest.raises(AuthorizationError):
            chain.transact(DEPLOYER, bridge.emergency_pause)
        chain.transact(USER, bridge.emergency_pause)

    def test_transfer_to_zero_address(self, chain, bridge):
        with pytest.raises(InvalidValueError, match="zero address"):
            chain.transact(DEPLOYER, bridge.transfer_ownership, ZERO_ADDRESS)

    def test_renounce(self, chain, bridge):
        chain.transact(DEPLOYER, bridge.renounce_ownership)
        assert bridge.owner() == ZERO_ADDRESS
        with pytest.raises(AuthorizationError):
            chain.transact(DEPLOYER, bridge.emergency_pause)

    def test_renounce_after_expiry(self, chain, bridge):
        chain.advance_time(OWNERSHIP_EXPIRY_DURATION)
        assert not bridge.is_ownership_expired()
        with pytest.raises(LifecycleError, match="not yet expired"):
            chain.transact(STRANGER, bridge.renounce_ownership_after_expiry)

        chain.advance_time(1)
        assert bridge.is_ownership_expired()
        receipt = chain.transact(STRANGER, bridge.renounce_ownership_after_expiry)
        assert bridge.owner() == ZERO_ADDRESS
        assert receipt.event(OwnershipTransferred).new_owner == ZERO_ADDRESS

        with pytest.raises(AuthorizationError, match="already renounced"):
            chain.transact(STRANGER, bridge.renounce_ownership_after_expiry)

    def test_owner_can_still_pause_after_expiry(self, chain, bridge):
        chain.advance_time(OWNERSHIP_EXPIRY_DURATION + 1)
        chain.transact(DEPLOYER, bridge.emergency_pause)
        assert bridge.paused()


# ══════════════════════════════════════════════════════════════════════
#  RE-ENTRANCY
# ══════════════════════════════════════════════════════════════════════

class TestReentrancy:

    def _hostile(self, chain, bridge):
        token = chain.deploy(DEPLOYER, ReentrantToken, "Hostile", "HST")
        chain.transact(DEPLOYER, token.mint, USER, 1_000)
        chain.transact(USER, token.approve, bridge.address, 1_000)
        return token

    def test_deposit_reentry_blocked(self, chain, bridge):
        token = self._hostile(chain, bridge)
        chain.transact(USER, token.arm, bridge.address, "send_to_helios", token.address, HELIOS_DEST, 1)
        with pytest.raises(ReentrancyError, match="reentrant call"):
            chain.transact(USER, bridge.send_to_helios, token.address, HELIOS_DEST, 10)
        assert token.balance_of(bridge.address) == 0
        assert bridge.state_last_event_nonce() == 0

    def test_batch_reentry_blocked(self, chain, bridge):
        token = self._hostile(chain, bridge)
        chain.transact(USER, token.arm, bridge.address, "submit_batch", GENESIS, [], [], [], [], [], [], 1, token.address, 10**9)
        with pytest.raises(ReentrancyError):
            chain.transact(USER, bridge.send_to_helios, token.address, HELIOS_DEST, 10)

    def test_guard_released_after_call(self, chain, bridge):
        token = self._hostile(chain, bridge)
        chain.transact(USER, bridge.send_to_helios, token.address, HELIOS_DEST, 10)
        chain.transact(USER, bridge.send_to_helios, token.address, HELIOS_DEST, 10)
        assert token.balance_of(bridge.address) == 20

    def test_guard_released_after_revert(self, chain, bridge, token):
        with pytest.raises(TokenError):
            chain.transact(USER, bridge.send_to_helios, token.address, HELIOS_DEST, 10)
        deposit(chain, bridge, token, 10)


# ══════════════════════════════════════════════════════════════════════
#  INVARIANTS
# ══════════════════════════════════════════════════════════════════════

class TestInvariants:

    def _mixed_run(self, chain, bridge, token):
        deposit(chain, bridge, token, 600)
        submit(chain, bridge, token.address, [100, 50], [DEST_X, DEST_Y], [3, 2], 1)
        update(chain, bridge, ROTATED)
        deposit(chain, bridge, token, 200)
        submit(chain, bridge, token.address, [40], [DEST_X], [4], 2, current=ROTATED, signers=(KEY_D, KEY_E))
        with pytest.raises(ReplayError):
            submit(chain, bridge, token.address, [40], [DEST_X], [4], 2, current=ROTATED, signers=(KEY_D, KEY_E))

    def test_event_nonces_are_unique_and_gapless(self, chain, bridge, token):
        self._mixed_run(chain, bridge, token)
        nonces = [
            log.event.event_nonce
            for log in chain.get_logs(address=bridge.address)
            if hasattr(log.event, "event_nonce")
        ]
        assert nonces == list(range(bridge.state_last_event_nonce() + 1))

    def test_checkpoint_matches_event_history(self, chain, bridge, token):
        self._mixed_run(chain, bridge, token)
        latest = chain.get_events(ValsetUpdatedEvent, bridge.address)[-1].to_valset()
        assert bridge.state_last_valset_checkpoint() == make_checkpoint(latest, HYPERION_ID)
        assert latest.total_power() >= bridge.state_power_threshold()

    def test_vault_accounting(self, chain, bridge, token):
        self._mixed_run(chain, bridge, token)
        received = sum(e.amount for e in chain.get_events(SendToHeliosEvent, bridge.address))
        paid_out = token.balance_of(DEST_X) + token.balance_of(DEST_Y) + token.balance_of(RELAYER)
        assert token.balance_of(bridge.address) == received - paid_out == 800 - 199

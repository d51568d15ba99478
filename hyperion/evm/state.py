"""
Contract State Manager

Snapshots and reverts for the simulated chain. A snapshot captures every
contract's persistent attributes, the contract registry, account nonces and
the log length, so a failing call can be undone exactly.
"""

import copy
from typing import TYPE_CHECKING, Any, Dict, List

if TYPE_CHECKING:
    from .chain import Chain


class StateManager:
    """
    Manages state snapshots and reverts for a Chain.

    Snapshots nest: reverting to snapshot *n* discards every snapshot taken
    after it, committing *n* discards only *n* and keeps the current state.
    """

    def __init__(self, chain: "Chain"):
        self._chain = chain
        self._snapshots: List[Dict[str, Any]] = []

    @property
    def depth(self) -> int:
        return len(self._snapshots)

    def snapshot(self) -> int:
        """
        Create state snapshot for revert.

        Returns:
            Snapshot ID
        """
        chain = self._chain
        snapshot = {
            'contracts': dict(chain._contracts),
            'storage': {
                address: copy.deepcopy(contract.persistent_state())
                for address, contract in chain._contracts.items()
            },
            'nonces': dict(chain._nonces),
            'log_count': len(chain._logs),
        }
        self._snapshots.append(snapshot)
        return len(self._snapshots) - 1

    def revert(self, snapshot_id: int) -> None:
        """
        Revert state to snapshot.

        Args:
            snapshot_id: Snapshot ID from snapshot()
        """
        if snapshot_id < 0 or snapshot_id >= len(self._snapshots):
            raise ValueError(f"Invalid snapshot ID: {snapshot_id}")

        snapshot = self._snapshots[snapshot_id]
        chain = self._chain
        chain._contracts = snapshot['contracts']
        for address, state in snapshot['storage'].items():
            chain._contracts[address].restore_state(state)
        chain._nonces = snapshot['nonces']
        del chain._logs[snapshot['log_count']:]

        # Remove this and newer snapshots
        self._snapshots = self._snapshots[:snapshot_id]

    def commit(self, snapshot_id: int) -> None:
        """Discard a snapshot (and newer ones) keeping the current state."""
        if snapshot_id < 0 or snapshot_id >= len(self._snapshots):
            raise ValueError(f"Invalid snapshot ID: {snapshot_id}")
        self._snapshots = self._snapshots[:snapshot_id]

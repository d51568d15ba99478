"""
HyperionSubgraph

Hyperion with the legacy ``sendToCosmos`` entry point. Deposits made through
it are identical to ``send_to_helios`` but carry no data string and are
announced with ``SendToCosmosEvent``.
"""

from typing import Union

from ..lifecycle import non_reentrant, when_not_paused
from .hyperion import Hyperion
from .types import SendToCosmosEvent


class HyperionSubgraph(Hyperion):

    @when_not_paused
    @non_reentrant
    def send_to_cosmos(self, token_contract: str, destination: Union[bytes, str], amount: int) -> int:
        token_contract, destination, received, event_nonce = self._deposit(
            token_contract, destination, amount
        )
        self.emit(SendToCosmosEvent(
            token_contract=token_contract,
            sender=self.msg_sender,
            destination=destination,
            amount=received,
            event_nonce=event_nonce,
        ))
        return received

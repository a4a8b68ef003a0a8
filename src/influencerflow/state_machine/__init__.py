"""Contract signature and negotiation status state machines."""

from influencerflow.state_machine.machine import (
    ContractSignatureMachine,
    NegotiationStatusMachine,
)
from influencerflow.state_machine.transitions import (
    CONTRACT_TERMINAL_STATES,
    CONTRACT_TRANSITIONS,
    NEGOTIATION_TERMINAL_STATES,
    NEGOTIATION_TRANSITIONS,
    ContractEvent,
    NegotiationEvent,
)

__all__ = [
    "CONTRACT_TERMINAL_STATES",
    "CONTRACT_TRANSITIONS",
    "ContractEvent",
    "ContractSignatureMachine",
    "NEGOTIATION_TERMINAL_STATES",
    "NEGOTIATION_TRANSITIONS",
    "NegotiationEvent",
    "NegotiationStatusMachine",
]

"""Finite state machines for contract signatures and negotiation status."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar, Generic, TypeVar

from influencerflow.domain.errors import InvalidTransitionError
from influencerflow.domain.types import ContractState, NegotiationStatus
from influencerflow.state_machine.transitions import (
    CONTRACT_TERMINAL_STATES,
    CONTRACT_TRANSITIONS,
    NEGOTIATION_TERMINAL_STATES,
    NEGOTIATION_TRANSITIONS,
)

S = TypeVar("S", bound=StrEnum)


class _TransitionMachine(Generic[S]):
    """Shared trigger/history logic driven by a class-level transition map."""

    transitions: ClassVar[dict]
    terminal_states: ClassVar[frozenset]

    def __init__(self, initial_state: S) -> None:
        self._state: S = initial_state
        self._history: list[tuple[S, str, S]] = []

    @property
    def state(self) -> S:
        """Return the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Return True if the machine is in a terminal state."""
        return self._state in self.terminal_states

    @property
    def history(self) -> list[tuple[S, str, S]]:
        """Return a copy of the ``(from_state, event, to_state)`` history."""
        return list(self._history)

    def trigger(self, event: str) -> S:
        """Apply an event to the current state and transition.

        Args:
            event: The event string (e.g. ``"brand_sign"``).

        Returns:
            The new state after the transition.

        Raises:
            InvalidTransitionError: If the transition is not allowed from
                the current state, or if the machine is in a terminal state.
        """
        if self.is_terminal:
            raise InvalidTransitionError(self._state, event)

        key = (self._state, event)
        if key not in self.transitions:
            raise InvalidTransitionError(self._state, event)

        old_state = self._state
        new_state = self.transitions[key]
        self._history.append((old_state, event, new_state))
        self._state = new_state
        return new_state

    def get_valid_events(self) -> list[str]:
        """Return a sorted list of events valid from the current state."""
        if self.is_terminal:
            return []
        return sorted(event for state, event in self.transitions if state == self._state)


class ContractSignatureMachine(_TransitionMachine[ContractState]):
    """Signature flow: draft -> one party signed -> fully executed.

    Usage::

        sm = ContractSignatureMachine()
        sm.trigger("creator_sign")   # -> CREATOR_SIGNED
        sm.trigger("brand_sign")     # -> FULLY_EXECUTED (terminal)
    """

    transitions = CONTRACT_TRANSITIONS
    terminal_states = CONTRACT_TERMINAL_STATES

    def __init__(self, initial_state: ContractState = ContractState.DRAFT) -> None:
        super().__init__(initial_state)


class NegotiationStatusMachine(_TransitionMachine[NegotiationStatus]):
    """Negotiation status lifecycle used to guard status writes."""

    transitions = NEGOTIATION_TRANSITIONS
    terminal_states = NEGOTIATION_TERMINAL_STATES

    def __init__(self, initial_state: NegotiationStatus = NegotiationStatus.DRAFT) -> None:
        super().__init__(initial_state)

    def move_to(self, target: NegotiationStatus) -> NegotiationStatus:
        """Transition directly to *target* via whichever event leads there.

        Args:
            target: The requested status.

        Returns:
            The new status.

        Raises:
            InvalidTransitionError: If no valid event leads from the current
                status to *target*.
        """
        for (state, event), next_state in self.transitions.items():
            if state == self._state and next_state == target:
                return self.trigger(event)
        raise InvalidTransitionError(self._state, f"-> {target}")

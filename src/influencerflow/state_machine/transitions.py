"""Transition maps defining all valid (state, event) -> state mappings."""

from enum import StrEnum

from influencerflow.domain.types import ContractState, NegotiationStatus


class ContractEvent(StrEnum):
    """Events that advance the contract signature flow."""

    BRAND_SIGN = "brand_sign"
    CREATOR_SIGN = "creator_sign"


class NegotiationEvent(StrEnum):
    """Events that move a negotiation between statuses."""

    ACTIVATE = "activate"
    AGREE = "agree"
    DECLINE = "decline"
    CONTRACT = "contract"


# Any pair not in this dict is an invalid transition, which includes
# a party signing twice.
CONTRACT_TRANSITIONS: dict[tuple[ContractState, str], ContractState] = {
    (ContractState.DRAFT, ContractEvent.BRAND_SIGN): ContractState.BRAND_SIGNED,
    (ContractState.DRAFT, ContractEvent.CREATOR_SIGN): ContractState.CREATOR_SIGNED,
    (ContractState.BRAND_SIGNED, ContractEvent.CREATOR_SIGN): ContractState.FULLY_EXECUTED,
    (ContractState.CREATOR_SIGNED, ContractEvent.BRAND_SIGN): ContractState.FULLY_EXECUTED,
}

CONTRACT_TERMINAL_STATES: frozenset[ContractState] = frozenset({ContractState.FULLY_EXECUTED})


NEGOTIATION_TRANSITIONS: dict[tuple[NegotiationStatus, str], NegotiationStatus] = {
    # From DRAFT
    (NegotiationStatus.DRAFT, NegotiationEvent.ACTIVATE): NegotiationStatus.ACTIVE,
    (NegotiationStatus.DRAFT, NegotiationEvent.DECLINE): NegotiationStatus.DECLINED,
    # From ACTIVE
    (NegotiationStatus.ACTIVE, NegotiationEvent.AGREE): NegotiationStatus.AGREED,
    (NegotiationStatus.ACTIVE, NegotiationEvent.DECLINE): NegotiationStatus.DECLINED,
    # From AGREED
    (NegotiationStatus.AGREED, NegotiationEvent.CONTRACT): NegotiationStatus.CONTRACTED,
}

NEGOTIATION_TERMINAL_STATES: frozenset[NegotiationStatus] = frozenset(
    {NegotiationStatus.DECLINED, NegotiationStatus.CONTRACTED}
)

"""Tests for domain enumerations."""

import pytest

from influencerflow.domain.types import (
    CONTRACT_STATUS_BY_STATE,
    Channel,
    ContractState,
    ContractStatus,
    NegotiationStatus,
    UserType,
)


class TestEnums:
    def test_string_serialization(self):
        assert str(UserType.BRAND) == "brand"
        assert str(Channel.IN_APP) == "in_app"
        assert NegotiationStatus("contracted") == NegotiationStatus.CONTRACTED

    def test_unknown_channel_raises(self):
        with pytest.raises(ValueError):
            Channel("fax")


class TestContractStatusByState:
    def test_every_state_is_mapped(self):
        assert set(CONTRACT_STATUS_BY_STATE) == set(ContractState)

    def test_single_signature_is_partial(self):
        assert CONTRACT_STATUS_BY_STATE[ContractState.BRAND_SIGNED] == ContractStatus.PARTIALLY_SIGNED
        assert (
            CONTRACT_STATUS_BY_STATE[ContractState.CREATOR_SIGNED]
            == ContractStatus.PARTIALLY_SIGNED
        )
        assert CONTRACT_STATUS_BY_STATE[ContractState.FULLY_EXECUTED] == ContractStatus.SIGNED

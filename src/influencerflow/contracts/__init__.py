"""Contract generation, signature flow and routes."""

from influencerflow.contracts.service import ContractService, make_contract_id
from influencerflow.contracts.terms import build_contract_terms, deliverable_count

__all__ = [
    "ContractService",
    "build_contract_terms",
    "deliverable_count",
    "make_contract_id",
]

"""Domain types, models, and errors for InfluencerFlow."""

from influencerflow.domain.errors import (
    ConflictError,
    ExternalServiceError,
    InfluencerFlowError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ServiceUnavailableError,
    ValidationFailedError,
    first_validation_message,
)
from influencerflow.domain.models import Contract, SignatureData, SignatureRecord
from influencerflow.domain.types import (
    CONTRACT_STATUS_BY_STATE,
    CampaignStatus,
    Channel,
    ContractState,
    ContractStatus,
    DeliveryStatus,
    Direction,
    InterestLevel,
    MessageType,
    NegotiationStatus,
    RecommendationStatus,
    SignerType,
    UserType,
)

__all__ = [
    "CONTRACT_STATUS_BY_STATE",
    "CampaignStatus",
    "Channel",
    "ConflictError",
    "Contract",
    "ContractState",
    "ContractStatus",
    "DeliveryStatus",
    "Direction",
    "ExternalServiceError",
    "InfluencerFlowError",
    "InterestLevel",
    "InvalidTransitionError",
    "MessageType",
    "NegotiationStatus",
    "NotFoundError",
    "PermissionDeniedError",
    "RecommendationStatus",
    "ServiceUnavailableError",
    "SignatureData",
    "SignatureRecord",
    "SignerType",
    "UserType",
    "ValidationFailedError",
    "first_validation_message",
]

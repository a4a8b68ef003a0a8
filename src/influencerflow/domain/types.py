"""Domain enumerations for the InfluencerFlow platform."""

from enum import StrEnum


class UserType(StrEnum):
    """Account roles."""

    BRAND = "brand"
    CREATOR = "creator"


class CampaignStatus(StrEnum):
    """Lifecycle of a published campaign."""

    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class NegotiationStatus(StrEnum):
    """States in the negotiation lifecycle."""

    DRAFT = "draft"
    ACTIVE = "active"
    AGREED = "agreed"
    DECLINED = "declined"
    CONTRACTED = "contracted"


class ContractState(StrEnum):
    """States of the contract signature flow."""

    DRAFT = "draft"
    BRAND_SIGNED = "brand_signed"
    CREATOR_SIGNED = "creator_signed"
    FULLY_EXECUTED = "fully_executed"


class ContractStatus(StrEnum):
    """Status string persisted inside the contract document."""

    DRAFT = "draft"
    PARTIALLY_SIGNED = "partially_signed"
    SIGNED = "signed"


class SignerType(StrEnum):
    """The party applying a signature."""

    BRAND = "brand"
    CREATOR = "creator"


class Channel(StrEnum):
    """Outreach delivery channels."""

    EMAIL = "email"
    IN_APP = "in_app"
    WHATSAPP = "whatsapp"


class Direction(StrEnum):
    """Direction of a communication log entry."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


class MessageType(StrEnum):
    """Kinds of communication log entries."""

    INITIAL_OUTREACH = "initial_outreach"
    REPLY = "reply"
    GENERAL = "general"
    CONTRACT = "contract"


class DeliveryStatus(StrEnum):
    """Result of an outreach send attempt."""

    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"


class RecommendationStatus(StrEnum):
    """Review state of a creator recommendation."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CONTACTED = "contacted"
    RESPONDED = "responded"


class InterestLevel(StrEnum):
    """Creator interest inferred from a reply."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Contract status persisted for each signature-flow state
CONTRACT_STATUS_BY_STATE: dict[ContractState, ContractStatus] = {
    ContractState.DRAFT: ContractStatus.DRAFT,
    ContractState.BRAND_SIGNED: ContractStatus.PARTIALLY_SIGNED,
    ContractState.CREATOR_SIGNED: ContractStatus.PARTIALLY_SIGNED,
    ContractState.FULLY_EXECUTED: ContractStatus.SIGNED,
}

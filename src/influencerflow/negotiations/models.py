"""Request bodies for the negotiation routes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CounterOfferRequest(BaseModel):
    """Body of ``POST /api/negotiations/{id}/counter-offer``."""

    model_config = ConfigDict(populate_by_name=True)

    proposed_terms: dict[str, Any] = Field(alias="proposedTerms")
    response_message: str | None = Field(default=None, alias="responseMessage")
    ai_generated: bool = Field(default=False, alias="aiGenerated")

"""Request models for the HTTP API."""

from pydantic import BaseModel, Field

from nutrition_enricher.domain.items import CandidateItem


class EnrichRequest(BaseModel):
    """Candidate items extracted upstream from a meal description."""

    items: list[CandidateItem] = Field(default_factory=list)

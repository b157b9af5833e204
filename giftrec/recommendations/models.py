from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, Field, computed_field, model_validator

from ..catalog.models import Item


class Relationship(str, Enum):
    friend = "friend"
    partner = "partner"
    parent = "parent"
    sibling = "sibling"
    colleague = "colleague"
    child = "child"
    other = "other"


class RecommendationRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    budget: float = Field(..., ge=0.0)
    interests: list[Annotated[str, Field(min_length=1)]] = Field(..., min_length=1)
    recipient_age: int | None = Field(default=None, ge=0, le=120)
    occasion: str | None = None
    relationship: Relationship | None = None
    limit: int = Field(default=10, ge=1, le=50)

    @model_validator(mode="before")
    @classmethod
    def _collapse_legacy_age(cls, data: Any) -> Any:
        # Older clients send ``age``; ``recipient_age`` wins when both are set
        if isinstance(data, dict) and "age" in data:
            data = dict(data)
            legacy_age = data.pop("age")
            if data.get("recipient_age") is None:
                data["recipient_age"] = legacy_age
        return data


class ScoreBreakdown(BaseModel):
    interest_match: int = Field(default=0, ge=0)
    budget_optimization: int = Field(default=0, ge=0)
    occasion_match: int = Field(default=0, ge=0)
    relationship_match: int = Field(default=0, ge=0)
    learning_boost: int = Field(default=0, ge=0)

    @computed_field
    @property
    def total(self) -> int:
        return (
            self.interest_match
            + self.budget_optimization
            + self.occasion_match
            + self.relationship_match
            + self.learning_boost
        )


class ScoredItem(BaseModel):
    item: Item
    score: int
    score_breakdown: ScoreBreakdown
    reason: str
    ai_explanation: str | None = None


class RecommendationResponse(BaseModel):
    recommendations: list[ScoredItem]
    count: int
    total_candidates: int = 0
    ai_enabled: bool = False


class CategoryCount(BaseModel):
    category: str
    interaction_count: int


class DiagnosticsSummary(BaseModel):
    user_id: str
    top_categories: list[CategoryCount] = Field(default_factory=list)
    top_boosted_tags: list[str] = Field(default_factory=list)
    ranking_explanation: str
    total_events: int = 0

from __future__ import annotations

from ..catalog.models import Item
from .models import RecommendationRequest, ScoreBreakdown
from .scoring import matched_interests


def explain(item: Item, request: RecommendationRequest, breakdown: ScoreBreakdown) -> str:
    """Build a deterministic one-sentence reason from the fired score components."""
    reasons: list[str] = []

    if breakdown.interest_match > 0:
        matched = matched_interests(item, request.interests)
        if matched:
            reasons.append(f"matches interests: {', '.join(matched)}")

    if breakdown.budget_optimization > 0:
        reasons.append("great value within budget")

    if breakdown.occasion_match > 0 and request.occasion:
        reasons.append(f"perfect for {request.occasion}")

    if breakdown.relationship_match > 0 and request.relationship:
        reasons.append(f"ideal gift for a {request.relationship.value}")

    if breakdown.learning_boost > 0:
        reasons.append("based on your previous preferences")

    if not reasons:
        return f"{item.title} is a popular choice in the {item.category} category."

    return f"{item.title} is recommended because it {', '.join(reasons)}."

from __future__ import annotations

from types import MappingProxyType

from ..catalog.models import Item
from .models import RecommendationRequest, ScoreBreakdown

INTEREST_POINTS = 10
BUDGET_POINTS = 5
OCCASION_POINTS = 5
RELATIONSHIP_POINTS = 5
LEARNING_POINTS = 15

# Price between 80% and 100% of budget counts as good use of it
BUDGET_SWEET_SPOT = (80.0, 100.0)

OCCASION_KEYWORDS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "birthday": ("birthday", "celebration", "party", "gift"),
    "anniversary": ("anniversary", "romantic", "love", "couple"),
    "wedding": ("wedding", "bride", "groom", "marriage"),
    "graduation": ("graduation", "graduate", "student", "achievement"),
    "christmas": ("christmas", "holiday", "festive", "xmas"),
    "valentines": ("valentine", "romantic", "love", "heart"),
    "mothers-day": ("mother", "mom", "maternal"),
    "fathers-day": ("father", "dad", "paternal"),
    "housewarming": ("home", "house", "living", "kitchen"),
    "baby": ("baby", "newborn", "infant", "nursery"),
})

RELATIONSHIP_CATEGORIES: MappingProxyType[str, frozenset[str]] = MappingProxyType({
    "friend": frozenset({"Electronics", "Toys", "Books", "Food", "Sports"}),
    "partner": frozenset({"Jewelry", "Beauty", "Home", "Fashion", "Food"}),
    "parent": frozenset({"Home", "Garden", "Books", "Food", "Beauty"}),
    "sibling": frozenset({"Electronics", "Toys", "Fashion", "Books", "Sports"}),
    "colleague": frozenset({"Office", "Food", "Books", "Home"}),
    "child": frozenset({"Toys", "Books", "Electronics", "Art", "Sports"}),
    "other": frozenset(),
})


def occasion_keywords(occasion: str) -> tuple[str, ...]:
    """Keywords for a known occasion, or the occasion itself as the only keyword."""
    key = occasion.strip().lower()
    return OCCASION_KEYWORDS.get(key, (key,))


def relationship_categories(relationship: str) -> frozenset[str]:
    return RELATIONSHIP_CATEGORIES.get(relationship, frozenset())


def _overlaps(tag: str, interest: str) -> bool:
    return interest in tag or tag in interest


def matched_interests(item: Item, interests: list[str]) -> list[str]:
    """Return the interests, in request order, that overlap any of the item's tags."""
    tags = [t.lower() for t in item.tags]
    return [i for i in interests if any(_overlaps(tag, i.lower()) for tag in tags)]


def _interest_score(item: Item, interests: list[str]) -> int:
    interests_lower = [i.lower() for i in interests]
    # Counted per tag, so a tag overlapping several interests scores once
    matches = sum(
        1
        for tag in item.tags
        if any(_overlaps(tag.lower(), i) for i in interests_lower)
    )
    return matches * INTEREST_POINTS


def _budget_score(price: float, budget: float) -> int:
    if budget <= 0:
        return 0
    pct = price / budget * 100
    low, high = BUDGET_SWEET_SPOT
    return BUDGET_POINTS if low <= pct <= high else 0


def _occasion_score(item: Item, occasion: str | None) -> int:
    if not occasion:
        return 0
    title = item.title.lower()
    description = item.description.lower()
    hit = any(k in title or k in description for k in occasion_keywords(occasion))
    return OCCASION_POINTS if hit else 0


def _relationship_score(item: Item, relationship: str | None) -> int:
    if not relationship:
        return 0
    return RELATIONSHIP_POINTS if item.category in relationship_categories(relationship) else 0


def score_item(
    item: Item,
    request: RecommendationRequest,
    learned_category: str | None = None,
) -> ScoreBreakdown:
    """Compute the per-factor score breakdown for one candidate."""
    relationship = request.relationship.value if request.relationship else None
    return ScoreBreakdown(
        interest_match=_interest_score(item, request.interests),
        budget_optimization=_budget_score(item.price, request.budget),
        occasion_match=_occasion_score(item, request.occasion),
        relationship_match=_relationship_score(item, relationship),
        learning_boost=(
            LEARNING_POINTS if learned_category and item.category == learned_category else 0
        ),
    )

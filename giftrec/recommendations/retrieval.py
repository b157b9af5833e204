from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from .enrichment import enrich
from .justification import explain
from .models import RecommendationRequest, ScoredItem
from .ports import CatalogLookup, ExplanationGenerator, InteractionHistory
from .scoring import score_item

logger = logging.getLogger(__name__)

# Items up to 15% over budget are still considered
BUDGET_FLEXIBILITY = 1.15
# Absorbs float error so a price exactly at budget * 1.15 is admitted
PRICE_TOLERANCE = 1e-9
# Fixed cap on how many candidates get scored, whatever the catalog size
CANDIDATE_LIMIT = 100
DEFAULT_LIMIT = 10


@dataclass
class Ranking:
    items: list[ScoredItem] = field(default_factory=list)
    # Candidates that passed the hard filter, before truncation to the limit
    total_candidates: int = 0


def price_ceiling(budget: float) -> float:
    """Highest admissible price for a budget (unrounded)."""
    return budget * BUDGET_FLEXIBILITY


def within_ceiling(price: float, ceiling: float) -> bool:
    return price <= ceiling + PRICE_TOLERANCE


def rank_recommendations(
    request: RecommendationRequest,
    limit: int = DEFAULT_LIMIT,
    *,
    catalog: CatalogLookup,
    history: InteractionHistory,
    generator: ExplanationGenerator,
) -> Ranking:
    start_time = time.time()

    if request.budget <= 0:
        return Ranking()

    # --- Hard filter ---
    ceiling = price_ceiling(request.budget)
    candidates = [
        item
        for item in catalog.fetch_candidates(ceiling + PRICE_TOLERANCE, CANDIDATE_LIMIT)
        if within_ceiling(item.price, ceiling)
    ]
    if not candidates:
        logger.info("No candidates under %.4f for user %s", ceiling, request.user_id)
        return Ranking()

    # --- Learning signal ---
    learned = history.fetch_top_category(request.user_id)
    learned_category = learned.category if learned else None

    # --- Scoring ---
    scored: list[ScoredItem] = []
    for item in candidates:
        breakdown = score_item(item, request, learned_category)
        scored.append(ScoredItem(
            item=item,
            score=breakdown.total,
            score_breakdown=breakdown,
            reason=explain(item, request, breakdown),
        ))

    # sorted() is stable, so equal scores keep catalog retrieval order
    top = sorted(scored, key=lambda s: s.score, reverse=True)[:limit]

    # --- LLM enrichment ---
    explanations = enrich(top, request, generator)
    for s in top:
        s.ai_explanation = explanations.get(s.item.id)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Ranked %d candidates for user %s (learned category: %s), returned %d in %sms",
        len(candidates),
        request.user_id,
        learned_category,
        len(top),
        elapsed_ms,
    )
    return Ranking(items=top, total_candidates=len(candidates))


def get_recommendations(
    request: RecommendationRequest,
    limit: int = DEFAULT_LIMIT,
    *,
    catalog: CatalogLookup,
    history: InteractionHistory,
    generator: ExplanationGenerator,
) -> list[ScoredItem]:
    """Ranked, justified and (where possible) enriched picks for a request."""
    return rank_recommendations(
        request, limit, catalog=catalog, history=history, generator=generator,
    ).items

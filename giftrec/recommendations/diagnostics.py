from __future__ import annotations

from collections import Counter

from .models import CategoryCount, DiagnosticsSummary
from .ports import CatalogLookup, InteractionHistory
from .scoring import LEARNING_POINTS

EVENT_WINDOW = 100
TOP_CATEGORIES = 5
TOP_TAGS = 10

NO_HISTORY_EXPLANATION = (
    "No interaction history found. "
    "Recommendations will be based solely on your profile preferences."
)


def _build_explanation(
    top_categories: list[CategoryCount],
    top_tags: list[str],
    total_events: int,
) -> str:
    lines = ["Based on your interaction history:", ""]
    if top_categories:
        lines.append(
            f'• Products in "{top_categories[0].category}" category receive a '
            f"+{LEARNING_POINTS} point boost"
        )
        lines.append(f"• You have shown interest in {len(top_categories)} different categories")
    if top_tags:
        sample = '", "'.join(top_tags[:3])
        lines.append(f'• Products with tags like "{sample}" are prioritized')
    lines.append(f"• Total of {total_events} interactions analyzed")
    return "\n".join(lines)


def get_diagnostics(
    user_id: str,
    *,
    catalog: CatalogLookup,
    history: InteractionHistory,
) -> DiagnosticsSummary:
    """Summarise how a user's recent interactions shape their ranking."""
    events = history.fetch_user_events(user_id, EVENT_WINDOW)
    if not events:
        return DiagnosticsSummary(
            user_id=user_id,
            ranking_explanation=NO_HISTORY_EXPLANATION,
            total_events=0,
        )

    item_ids = list(dict.fromkeys(e.item_id for e in events))
    items_by_id = {item.id: item for item in catalog.fetch_items_by_ids(item_ids)}

    # Every event counts, even repeat interactions with the same item
    category_counter: Counter[str] = Counter()
    tag_counter: Counter[str] = Counter()
    for event in events:
        item = items_by_id.get(event.item_id)
        if item is None:
            continue
        category_counter[item.category] += 1
        for tag in item.tags:
            tag_counter[tag] += 1

    top_categories = [
        CategoryCount(category=c, interaction_count=n)
        for c, n in category_counter.most_common(TOP_CATEGORIES)
    ]
    top_tags = [t for t, _ in tag_counter.most_common(TOP_TAGS)]

    return DiagnosticsSummary(
        user_id=user_id,
        top_categories=top_categories,
        top_boosted_tags=top_tags,
        ranking_explanation=_build_explanation(
            top_categories, top_tags, len(events),
        ),
        total_events=len(events),
    )

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

from ..llm.config import DEFAULT_LLM_CONFIG
from .models import RecommendationRequest, ScoredItem
from .ports import ExplanationGenerator

logger = logging.getLogger(__name__)

# Only the top picks get an LLM explanation, to bound API cost
ENRICHMENT_LIMIT = 5


def enrich(
    scored_items: list[ScoredItem],
    request: RecommendationRequest,
    generator: ExplanationGenerator,
    timeout: float = DEFAULT_LLM_CONFIG.timeout,
) -> dict[str, str]:
    """
    Ask the generator for an explanation of each of the top items, in parallel.

    Returns a dict mapping item id -> explanation. Items whose call failed,
    timed out or came back empty are simply missing from the dict.
    """
    if not generator.is_enabled():
        return {}

    batch = scored_items[:ENRICHMENT_LIMIT]
    if not batch:
        return {}

    executor = ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix="explain")
    futures = {
        scored.item.id: executor.submit(
            generator.generate_explanation, scored.item, request, scored.score_breakdown
        )
        for scored in batch
    }

    # One shared deadline: the batch costs about one call, not five
    deadline = time.monotonic() + timeout
    explanations: dict[str, str] = {}
    try:
        for item_id, future in futures.items():
            remaining = max(0.0, deadline - time.monotonic())
            try:
                text = future.result(timeout=remaining)
            except FutureTimeoutError:
                logger.warning("Explanation for item %s timed out after %.1fs", item_id, timeout)
                continue
            except Exception:
                logger.warning("Explanation for item %s failed", item_id, exc_info=True)
                continue
            if text:
                explanations[item_id] = text
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return explanations

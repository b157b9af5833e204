from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .catalog.data_store import CatalogUnavailableError, DataFrameCatalog, get_catalog
from .catalog.models import ProductPage
from .catalog.search import SearchFilters, SortOption, search_products
from .history.models import EventRequest, InteractionEvent
from .history.store import InMemoryInteractionHistory, get_history
from .llm.groq_client import build_explanation_generator
from .recommendations.cache import cache_get, cache_set, get_cache_stats, invalidate_user
from .recommendations.diagnostics import get_diagnostics
from .recommendations.models import (
    DiagnosticsSummary,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.ports import ExplanationGenerator
from .recommendations.retrieval import rank_recommendations

logging.basicConfig(
    level=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Gift Recommendation API", version="1.0.0")

_generator: ExplanationGenerator | None = None


def get_explanation_generator() -> ExplanationGenerator:
    global _generator
    if _generator is None:
        _generator = build_explanation_generator()
    return _generator


@app.exception_handler(CatalogUnavailableError)
def catalog_unavailable(request: Request, exc: CatalogUnavailableError) -> JSONResponse:
    logger.error("Catalog unavailable while serving %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Product catalog is unavailable"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/products/search", response_model=ProductPage)
def product_search(
    category: str | None = None,
    retailer: str | None = None,
    brand: str | None = None,
    min_price: float | None = Query(default=None, ge=0.0),
    max_price: float | None = Query(default=None, ge=0.0),
    search_term: str | None = None,
    sort: SortOption = SortOption.relevance,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    catalog: DataFrameCatalog = Depends(get_catalog),
) -> ProductPage:
    filters = SearchFilters(
        category=category,
        retailer=retailer,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        search_term=search_term,
    )
    return search_products(catalog, filters, limit=limit, offset=offset, sort=sort)


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    body: RecommendationRequest,
    catalog: DataFrameCatalog = Depends(get_catalog),
    history: InMemoryInteractionHistory = Depends(get_history),
    generator: ExplanationGenerator = Depends(get_explanation_generator),
) -> RecommendationResponse:
    request_dict = body.model_dump(mode="json")
    cached = cache_get(request_dict)
    if cached is not None:
        return cached

    ranking = rank_recommendations(
        body,
        body.limit,
        catalog=catalog,
        history=history,
        generator=generator,
    )
    response = RecommendationResponse(
        recommendations=ranking.items,
        count=len(ranking.items),
        total_candidates=ranking.total_candidates,
        ai_enabled=generator.is_enabled(),
    )
    cache_set(request_dict, response)
    return response


@app.get("/users/{user_id}/diagnostics", response_model=DiagnosticsSummary)
def diagnostics(
    user_id: str,
    catalog: DataFrameCatalog = Depends(get_catalog),
    history: InMemoryInteractionHistory = Depends(get_history),
) -> DiagnosticsSummary:
    return get_diagnostics(user_id, catalog=catalog, history=history)


# ── Event tracking ───────────────────────────────────────────────────────


@app.post("/events", response_model=InteractionEvent, status_code=201)
def track_event(
    body: EventRequest,
    catalog: DataFrameCatalog = Depends(get_catalog),
    history: InMemoryInteractionHistory = Depends(get_history),
) -> InteractionEvent:
    if catalog.get_item(body.item_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown item: {body.item_id}")
    event = history.record_event(body.user_id, body.item_id, body.event_type)
    # The learned category may have moved, so cached rankings are stale
    invalidate_user(body.user_id)
    return event


@app.get("/users/{user_id}/events", response_model=list[InteractionEvent])
def user_events(
    user_id: str,
    limit: int = Query(default=50, ge=1, le=100),
    history: InMemoryInteractionHistory = Depends(get_history),
) -> list[InteractionEvent]:
    return history.fetch_user_events(user_id, limit)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()

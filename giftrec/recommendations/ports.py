"""Interfaces the recommendation engine needs from its collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..catalog.models import Item
    from ..history.models import InteractionEvent, LearnedCategory
    from .models import RecommendationRequest, ScoreBreakdown


class CatalogLookup(ABC):
    """Read access to the product catalog."""

    @abstractmethod
    def fetch_candidates(self, max_price: float, limit: int) -> list[Item]:
        """Return at most ``limit`` items priced at or below ``max_price``."""

    @abstractmethod
    def fetch_items_by_ids(self, ids: list[str]) -> list[Item]:
        """Return the items whose ids are in ``ids``; unknown ids are skipped."""


class InteractionHistory(ABC):
    """Read access to a user's recorded interactions."""

    @abstractmethod
    def fetch_user_events(self, user_id: str, limit: int | None = None) -> list[InteractionEvent]:
        """Return the user's events, most recent first."""

    @abstractmethod
    def fetch_top_category(self, user_id: str) -> LearnedCategory | None:
        """Return the category the user interacted with most, if any."""


class ExplanationGenerator(ABC):
    """Free-text explanation capability, possibly unconfigured."""

    @abstractmethod
    def is_enabled(self) -> bool:
        ...

    @abstractmethod
    def generate_explanation(
        self,
        item: Item,
        request: RecommendationRequest,
        breakdown: ScoreBreakdown,
    ) -> str | None:
        """Return a short explanation; may raise on provider failure."""

from __future__ import annotations

import logging

from groq import Groq

from ..catalog.models import Item
from ..recommendations.models import RecommendationRequest, ScoreBreakdown
from ..recommendations.ports import ExplanationGenerator
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a gift recommendation expert. "
    "Generate brief, personalized explanations (2-3 sentences) for why a "
    "product is a great gift match. Be enthusiastic but concise."
)


def _fired_reasons(request: RecommendationRequest, breakdown: ScoreBreakdown) -> str:
    parts: list[str] = []
    if breakdown.interest_match > 0:
        parts.append(f"matches their interests in {', '.join(request.interests)}")
    if breakdown.budget_optimization > 0:
        parts.append("fits perfectly within the budget")
    if breakdown.occasion_match > 0 and request.occasion:
        parts.append(f"is ideal for {request.occasion}")
    if breakdown.relationship_match > 0 and request.relationship:
        parts.append(f"suits their relationship as a {request.relationship.value}")
    if breakdown.learning_boost > 0:
        parts.append("aligns with their previous preferences")
    return ", and ".join(parts) if parts else "is a great match"


def build_prompt(item: Item, request: RecommendationRequest, breakdown: ScoreBreakdown) -> str:
    recipient = f"a {request.recipient_age}-year-old" if request.recipient_age is not None else "someone"
    occasion = f" for {request.occasion}" if request.occasion else ""
    relationship = (
        f" (their {request.relationship.value})"
        if request.relationship and request.relationship.value != "other"
        else ""
    )
    interests = ", ".join(request.interests)

    lines = [
        f'Product: "{item.title}"',
        f"Description: {item.description}",
        f"Price: ${item.price:.2f}",
        f"Budget: ${request.budget:.2f}",
        "",
        f"This is being recommended as a gift for {recipient}{relationship}{occasion} "
        f"who is interested in: {interests}.",
        "",
        f"The recommendation score is {breakdown.total} because it "
        f"{_fired_reasons(request, breakdown)}.",
        "",
        "Write a brief, engaging explanation (2-3 sentences) of why this would "
        "make a perfect gift for them.",
    ]
    return "\n".join(lines)


class GroqExplanationGenerator(ExplanationGenerator):
    """Writes gift explanations with a Groq chat completion."""

    def __init__(self, config: LLMConfig = DEFAULT_LLM_CONFIG):
        self.config = config
        self._client = Groq(api_key=config.api_key, timeout=config.timeout)

    def is_enabled(self) -> bool:
        return True

    def generate_explanation(
        self,
        item: Item,
        request: RecommendationRequest,
        breakdown: ScoreBreakdown,
    ) -> str | None:
        response = self._client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(item, request, breakdown)},
            ],
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        content = (response.choices[0].message.content or "").strip()
        return content or None


class NullExplanationGenerator(ExplanationGenerator):
    """Stand-in used when no Groq credentials are configured."""

    def is_enabled(self) -> bool:
        return False

    def generate_explanation(
        self,
        item: Item,
        request: RecommendationRequest,
        breakdown: ScoreBreakdown,
    ) -> str | None:
        return None


def build_explanation_generator(config: LLMConfig = DEFAULT_LLM_CONFIG) -> ExplanationGenerator:
    if not config.enabled or not config.api_key:
        logger.info("GROQ_API_KEY not set, AI explanations disabled")
        return NullExplanationGenerator()
    return GroqExplanationGenerator(config)

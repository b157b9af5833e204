"""
Gift recommendation engine.

Responsibilities:
- Accept a requester's budget, interests and recipient context.
- Admit only catalog items inside the budget's flexibility buffer.
- Score candidates on interests, budget fit, occasion, relationship and the
  user's learned category.
- Explain each suggestion, optionally enriched by an LLM for the top picks.
- Summarise how a user's interaction history is biasing their ranking.
"""

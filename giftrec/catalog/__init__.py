"""
Product catalog.

Responsibilities:
- Load the canonical product dataset into memory.
- Serve bounded, price-capped candidate sets to the recommendation engine.
- Look up products by id for diagnostics.
- Filter, sort and paginate products for browsing.
"""

"""
Interaction history.

Responsibilities:
- Record view, click and save events as users browse recommendations.
- Serve a user's recent events, newest first.
- Derive the user's most-interacted category for the learning boost.
"""

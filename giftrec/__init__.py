"""
Gift recommendation service.

Ranks a gift catalog against a requester's budget, interests and recipient
context, boosted by what the user has interacted with before, and explains
every suggestion.
"""

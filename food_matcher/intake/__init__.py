"""Batch intake: match parsed ingredients and queue the rest for review."""
from .intake_service import MAX_CANDIDATES, match_ingredients
from .review_queue import JsonlReviewQueueGateway, ReviewQueue

__all__ = ["MAX_CANDIDATES", "match_ingredients", "JsonlReviewQueueGateway", "ReviewQueue"]

"""
Ingredient → food catalog matching.

Main entry points:
    rank_candidates / best_candidate   score and rank catalog entries
    check_problematic_match            known-bad pairing veto
    categorize                         veto fallback + auto/probable/review tiers
    match_ingredients                  batch intake with review queue
"""
from .types import (
    CatalogEntry,
    FoodMatchCandidate,
    MatchReason,
    MatchThresholds,
    MatchTier,
    ParsedIngredient,
)
from .alignment.ranker import best_candidate, rank_candidates
from .alignment.gotchas import check_problematic_match, is_problematic
from .alignment.categorizer import categorize
from .intake.intake_service import match_ingredients

__version__ = "0.1.0"

__all__ = [
    "CatalogEntry",
    "FoodMatchCandidate",
    "MatchReason",
    "MatchThresholds",
    "MatchTier",
    "ParsedIngredient",
    "best_candidate",
    "rank_candidates",
    "check_problematic_match",
    "is_problematic",
    "categorize",
    "match_ingredients",
]

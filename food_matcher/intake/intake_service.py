"""
Recipe intake: match a batch of parsed ingredients against one catalog snapshot.

Flow per ingredient:
    rank (shared index) → keep top N → veto fallback + tiers → route

Routing:
    auto-match      → matches
    probable        → probables + unmatched + review queue
    pending-review  → unmatched + review queue
"""
from typing import List, Optional, Sequence

from ..adapters.embedding_gateway import EmbeddingCache, EmbeddingGateway
from ..alignment.categorizer import categorize
from ..alignment.gotchas import VetoTables
from ..alignment.indexer import build_index
from ..alignment.ranker import rank_indexed
from ..config.feature_flags import verbose_enabled
from ..types import (
    CatalogEntry,
    IntakeOutcome,
    MatchedIngredient,
    MatchThresholds,
    MatchTier,
    ParsedIngredient,
    ReviewQueueItem,
)
from .review_queue import ReviewQueue, build_review_item

MAX_CANDIDATES = 5


def match_ingredients(
    parsed: Sequence[ParsedIngredient],
    catalog: Sequence[CatalogEntry],
    embedding_gateway: Optional[EmbeddingGateway] = None,
    review_queue: Optional[ReviewQueue] = None,
    thresholds: Optional[MatchThresholds] = None,
    veto_tables: Optional[VetoTables] = None,
    max_candidates: int = MAX_CANDIDATES
) -> IntakeOutcome:
    """
    Match every parsed ingredient against the catalog.

    Args:
        parsed: Parsed recipe ingredients, in recipe order
        catalog: Catalog snapshot (indexed once for the whole batch)
        embedding_gateway: Optional embedding provider (memoized per call)
        review_queue: Optional queue; when given, pending_review is its flushed snapshot
        thresholds: Tier thresholds (default: from FLAGS)
        veto_tables: Gotcha tables (default: built-in)
        max_candidates: Ranked candidates kept per ingredient

    Returns:
        IntakeOutcome with one MatchedIngredient per input ingredient
    """
    indexed = build_index(catalog)
    embedding_cache = EmbeddingCache(embedding_gateway) if embedding_gateway is not None else None

    ingredients: List[MatchedIngredient] = []
    matches: List[MatchedIngredient] = []
    probables: List[MatchedIngredient] = []
    pending: List[ReviewQueueItem] = []
    unmatched: List[ParsedIngredient] = []

    for ingredient in parsed:
        ranked = rank_indexed(ingredient, indexed, embedding_cache)[:max(0, max_candidates)]
        result = categorize(ingredient, ranked, thresholds=thresholds, tables=veto_tables)

        matched = MatchedIngredient(
            ingredient=ingredient,
            tier=result.tier,
            food_id=result.auto_match.food.id if result.auto_match else None,
            match=result.chosen,
            candidates=ranked,
        )
        ingredients.append(matched)

        if result.tier == MatchTier.AUTO_MATCH:
            if verbose_enabled():
                print(f"[INTAKE] auto-match: '{ingredient.name}' → "
                      f"{result.auto_match.food.name} ({result.auto_match.confidence})")
            matches.append(matched)
            continue

        unmatched.append(ingredient)

        if result.tier == MatchTier.PROBABLE:
            if verbose_enabled():
                print(f"[INTAKE] probable: '{ingredient.name}' → "
                      f"{result.probable_match.food.name} ({result.probable_match.confidence})")
            probables.append(matched)

        if review_queue is not None:
            review_queue.enqueue(ingredient, result.best)
        else:
            pending.append(build_review_item(ingredient, result.best))

    if review_queue is not None:
        pending = review_queue.flush()

    if verbose_enabled():
        print(f"[INTAKE] Finished: {len(matches)} auto-matched, {len(probables)} probable, "
              f"{len(pending)} pending review (of {len(ingredients)})")

    return IntakeOutcome(
        ingredients=ingredients,
        matches=matches,
        probables=probables,
        pending_review=pending,
        unmatched=unmatched,
    )

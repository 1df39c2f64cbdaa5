"""
Candidate ranking: score every catalog entry for one ingredient.

Results are sorted by descending confidence; ties keep catalog order
(Python's sort is stable).
"""
from typing import List, Optional, Sequence

from ..adapters.embedding_gateway import EmbeddingCache
from ..config.feature_flags import FLAGS, verbose_enabled
from ..normalizers.ingredient_normalizer import normalize_for_comparison
from ..types import CatalogEntry, FoodMatchCandidate, IndexedCandidate, ParsedIngredient
from .indexer import build_index
from .scoring import ingredient_tokens, score_candidate


def rank_indexed(
    ingredient: ParsedIngredient,
    indexed: Sequence[IndexedCandidate],
    embedding_cache: Optional[EmbeddingCache] = None
) -> List[FoodMatchCandidate]:
    """
    Rank an ingredient against an already-built index.

    Args:
        ingredient: Parsed recipe ingredient
        indexed: Output of build_index()
        embedding_cache: Optional per-request embedding memo

    Returns:
        Candidates with confidence > 0, best first
    """
    if not indexed:
        return []

    ingredient_name = normalize_for_comparison(ingredient.name)
    if not ingredient_name:
        return []

    tokens = ingredient_tokens(ingredient)

    use_embeddings = embedding_cache is not None and FLAGS.enable_embedding_signal
    ingredient_embedding = None
    if use_embeddings:
        ingredient_embedding = embedding_cache.get_ingredient_embedding(ingredient)

    scored: List[FoodMatchCandidate] = []
    for candidate in indexed:
        candidate_embedding = None
        # No ingredient vector means no similarity to compute; skip the food call
        if ingredient_embedding is not None:
            candidate_embedding = embedding_cache.get_food_embedding(candidate.entry)

        match = score_candidate(
            ingredient,
            candidate,
            ingredient_embedding=ingredient_embedding,
            candidate_embedding=candidate_embedding,
            ingredient_name=ingredient_name,
            tokens=tokens,
        )
        if match is not None:
            scored.append(match)

    scored.sort(key=lambda c: c.confidence, reverse=True)

    if verbose_enabled():
        top = ", ".join(f"{c.food.name}={c.confidence}" for c in scored[:3]) or "none"
        print(f"[MATCH] '{ingredient.name}' → {len(scored)} candidates (top: {top})")

    return scored


def rank_candidates(
    ingredient: ParsedIngredient,
    catalog: Sequence[CatalogEntry],
    embedding_cache: Optional[EmbeddingCache] = None
) -> List[FoodMatchCandidate]:
    """
    Rank catalog entries for an ingredient.

    The index is rebuilt on every call; use rank_indexed() to share one index
    across several ingredients.

    Examples:
        "celery" vs [Celery, Celery Salt] → [Celery (100), Celery Salt (...)]
        empty catalog or blank name → []
    """
    if not catalog:
        return []
    return rank_indexed(ingredient, build_index(catalog), embedding_cache)


def best_candidate(
    ingredient: ParsedIngredient,
    catalog: Sequence[CatalogEntry],
    embedding_cache: Optional[EmbeddingCache] = None
) -> Optional[FoodMatchCandidate]:
    """Top-ranked candidate or None."""
    ranked = rank_candidates(ingredient, catalog, embedding_cache)
    return ranked[0] if ranked else None

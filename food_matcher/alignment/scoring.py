"""
Signal scorers and score combination for ingredient → catalog matching.

Each signal inspects one (ingredient, candidate) pair and emits zero or one
MatchReason on its own scale:

    exact-name            100
    alias-exact            95
    prefix-match           85   (needs token coverage >= 0.6)
    token-overlap      60/70/80 (coverage >= 0.4/0.6/0.8; 100 on perfect match)
    alias-token-overlap    70
    fuzzy-similarity   sim*70   (Levenshtein similarity >= 0.6)
    embedding-similarity sim*100 (cosine >= 0.6)

combine_scores() folds the reasons into one 0-100 confidence: the strongest
signal counts in full, every other signal adds 20% of its score.
"""
from typing import Dict, List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from ..adapters.embedding_gateway import EmbeddingVector, cosine_similarity
from ..normalizers.ingredient_normalizer import (
    normalize_for_comparison,
    normalize_ingredient_name,
)
from ..types import (
    ALIAS_EXACT,
    ALIAS_TOKEN_OVERLAP,
    EMBEDDING_SIMILARITY,
    EXACT_NAME,
    FUZZY_SIMILARITY,
    PREFIX_MATCH,
    TOKEN_OVERLAP,
    FoodMatchCandidate,
    IndexedCandidate,
    MatchReason,
    ParsedIngredient,
)

EXACT_NAME_SCORE = 100
ALIAS_EXACT_SCORE = 95
PREFIX_SCORE = 85
TOKEN_SCORE_HIGH = 80
TOKEN_SCORE_MEDIUM = 70
TOKEN_SCORE_LOW = 60
ALIAS_TOKEN_SCORE = TOKEN_SCORE_MEDIUM
FUZZY_SCORE_WEIGHT = 70
EMBEDDING_SCORE_WEIGHT = 100

# (coverage floor, score), checked highest first
TOKEN_COVERAGE_BANDS = (
    (0.8, TOKEN_SCORE_HIGH),
    (0.6, TOKEN_SCORE_MEDIUM),
    (0.4, TOKEN_SCORE_LOW),
)
PREFIX_MIN_COVERAGE = 0.6
ALIAS_TOKEN_MIN_COVERAGE = 0.8
FUZZY_MIN_SIMILARITY = 0.6
EMBEDDING_MIN_SIMILARITY = 0.6

SECONDARY_SIGNAL_WEIGHT = 0.2


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (round(2.5) would give 2)."""
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)


def ingredient_tokens(ingredient: ParsedIngredient) -> List[str]:
    """Precomputed tokens if supplied, else derived from the ingredient name."""
    if ingredient.normalized_tokens is not None:
        return list(ingredient.normalized_tokens)
    return normalize_ingredient_name(ingredient.name).tokens


def levenshtein_similarity(a: str, b: str) -> Optional[float]:
    """
    1 - distance / max(len(a), len(b)); None when either string is empty.
    """
    if not (a and b):
        return None
    if a == b:
        return 1.0
    return Levenshtein.normalized_similarity(a, b)


def score_token_overlap(
    tokens: Sequence[str],
    candidate_tokens: frozenset
) -> Optional[MatchReason]:
    """
    Token-overlap reason banded by coverage.

    coverage = max(matched / candidate tokens, matched / ingredient tokens)
    """
    if not tokens or not candidate_tokens:
        return None

    matched = [t for t in tokens if t in candidate_tokens]
    if not matched:
        return None

    coverage = max(len(matched) / len(candidate_tokens), len(matched) / len(tokens))

    for floor, score in TOKEN_COVERAGE_BANDS:
        if coverage >= floor:
            return MatchReason(TOKEN_OVERLAP, score, {"coverage": coverage})

    return None


def score_alias_token_overlap(
    tokens: Sequence[str],
    alias_token_sets: Sequence[frozenset]
) -> Optional[MatchReason]:
    """First alias whose tokens are >= 80% covered by the ingredient tokens."""
    if not tokens or not alias_token_sets:
        return None

    for alias_tokens in alias_token_sets:
        if not alias_tokens:
            continue
        matched = [t for t in tokens if t in alias_tokens]
        coverage = len(matched) / len(alias_tokens)
        if coverage >= ALIAS_TOKEN_MIN_COVERAGE:
            return MatchReason(ALIAS_TOKEN_OVERLAP, ALIAS_TOKEN_SCORE, {"coverage": coverage})

    return None


def is_perfect_token_match(tokens: Sequence[str], candidate_tokens: frozenset) -> bool:
    """Ingredient and candidate token sets fully contain each other."""
    if not candidate_tokens:
        return False
    token_set = set(tokens)
    return (all(t in candidate_tokens for t in tokens)
            and all(t in token_set for t in candidate_tokens))


def should_apply_prefix_match(
    token_overlap: Optional[MatchReason],
    ingredient_name: str,
    candidate_name: str
) -> bool:
    """
    Prefix match only counts alongside decent token overlap, so a short word
    can't act as a false prefix of an unrelated compound ("salt" / "salted butter").
    """
    if token_overlap is None:
        return False

    coverage = token_overlap.metadata.get("coverage")
    if not isinstance(coverage, (int, float)) or coverage < PREFIX_MIN_COVERAGE:
        return False

    return (candidate_name.startswith(ingredient_name)
            or ingredient_name.startswith(candidate_name))


def score_fuzzy_similarity(ingredient_name: str, candidate_name: str) -> Optional[MatchReason]:
    similarity = levenshtein_similarity(ingredient_name, candidate_name)
    if similarity is None or similarity < FUZZY_MIN_SIMILARITY:
        return None
    return MatchReason(
        FUZZY_SIMILARITY,
        round_half_up(similarity * FUZZY_SCORE_WEIGHT),
        {"similarity": similarity},
    )


def score_embedding_similarity(
    ingredient_embedding: Optional[EmbeddingVector],
    candidate_embedding: Optional[EmbeddingVector]
) -> Optional[MatchReason]:
    if ingredient_embedding is None or candidate_embedding is None:
        return None

    similarity = cosine_similarity(ingredient_embedding, candidate_embedding)
    if similarity != similarity or similarity < EMBEDDING_MIN_SIMILARITY:
        return None

    return MatchReason(
        EMBEDDING_SIMILARITY,
        round_half_up(similarity * EMBEDDING_SCORE_WEIGHT),
        {"similarity": similarity},
    )


def combine_scores(reasons: Sequence[MatchReason]) -> int:
    """
    Fold reasons into one confidence in [0, 100].

    Examples:
        [100]          → 100
        [80, 70]       → 80 + 14 = 94
        [60, 60, 60]   → 60 + 12 + 12 = 84
    """
    if not reasons:
        return 0

    scores = sorted((r.score for r in reasons), reverse=True)
    combined = scores[0] + sum(s * SECONDARY_SIGNAL_WEIGHT for s in scores[1:])
    return round_half_up(max(0.0, min(100.0, combined)))


def collect_reasons(
    ingredient: ParsedIngredient,
    candidate: IndexedCandidate,
    ingredient_embedding: Optional[EmbeddingVector] = None,
    candidate_embedding: Optional[EmbeddingVector] = None,
    ingredient_name: Optional[str] = None,
    tokens: Optional[Sequence[str]] = None
) -> List[MatchReason]:
    """
    Run every signal for one pair, in a fixed order.

    `ingredient_name` / `tokens` may be passed in precomputed when the same
    ingredient is scored against many candidates.
    """
    if ingredient_name is None:
        ingredient_name = normalize_for_comparison(ingredient.name)
    if tokens is None:
        tokens = ingredient_tokens(ingredient)

    if not ingredient_name:
        return []

    reasons: List[MatchReason] = []

    if candidate.normalized_name == ingredient_name:
        reasons.append(MatchReason(EXACT_NAME, EXACT_NAME_SCORE))

    if ingredient_name in candidate.alias_set:
        reasons.append(MatchReason(ALIAS_EXACT, ALIAS_EXACT_SCORE))

    token_overlap = score_token_overlap(tokens, candidate.token_set)

    if should_apply_prefix_match(token_overlap, ingredient_name, candidate.normalized_name):
        reasons.append(MatchReason(PREFIX_MATCH, PREFIX_SCORE))

    if token_overlap is not None:
        reasons.append(token_overlap)
        # Lets "celery" reach full confidence on "Celery" despite the 80 band cap
        if token_overlap.score < EXACT_NAME_SCORE and is_perfect_token_match(tokens, candidate.token_set):
            reasons.append(MatchReason(
                TOKEN_OVERLAP,
                EXACT_NAME_SCORE,
                {"perfect_match": True, "coverage": token_overlap.metadata.get("coverage")},
            ))

    alias_overlap = score_alias_token_overlap(tokens, candidate.alias_token_sets)
    if alias_overlap is not None:
        reasons.append(alias_overlap)

    fuzzy = score_fuzzy_similarity(ingredient_name, candidate.normalized_name)
    if fuzzy is not None:
        reasons.append(fuzzy)

    embedding = score_embedding_similarity(ingredient_embedding, candidate_embedding)
    if embedding is not None:
        reasons.append(embedding)

    return reasons


def score_candidate(
    ingredient: ParsedIngredient,
    candidate: IndexedCandidate,
    ingredient_embedding: Optional[EmbeddingVector] = None,
    candidate_embedding: Optional[EmbeddingVector] = None,
    **precomputed
) -> Optional[FoodMatchCandidate]:
    """
    Score one catalog candidate against an ingredient.

    Returns:
        FoodMatchCandidate (index-only fields stripped), or None when no signal fired
    """
    reasons = collect_reasons(
        ingredient,
        candidate,
        ingredient_embedding=ingredient_embedding,
        candidate_embedding=candidate_embedding,
        **precomputed
    )
    if not reasons:
        return None

    confidence = combine_scores(reasons)
    if confidence <= 0:
        return None

    return FoodMatchCandidate(food=candidate.entry, confidence=confidence, reasons=reasons)


def reason_summary(candidate: FoodMatchCandidate) -> Dict[str, int]:
    """Reason type → highest score, for compact telemetry lines."""
    summary: Dict[str, int] = {}
    for reason in candidate.reasons:
        summary[reason.type] = max(summary.get(reason.type, 0), reason.score)
    return summary

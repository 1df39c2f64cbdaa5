"""
Categorizer: veto fallback, then confidence tiers.

    confidence >= hard                         → auto-match
    confidence >= 80 with perfect token match  → auto-match
    confidence >= soft                         → probable
    otherwise                                  → pending-review (best kept as suggestion)
"""
from typing import Optional, Sequence

from ..config.feature_flags import FLAGS, verbose_enabled
from ..types import CategorizedMatch, FoodMatchCandidate, MatchThresholds, ParsedIngredient
from .gotchas import VetoTables, select_acceptable_candidate


def is_auto_match(candidate: FoodMatchCandidate, thresholds: MatchThresholds) -> bool:
    if candidate.confidence >= thresholds.hard:
        return True
    return (candidate.confidence >= thresholds.perfect_token_floor
            and candidate.has_perfect_token_match)


def categorize(
    ingredient: ParsedIngredient,
    ranked: Sequence[FoodMatchCandidate],
    thresholds: Optional[MatchThresholds] = None,
    tables: Optional[VetoTables] = None,
    max_fallback: Optional[int] = None
) -> CategorizedMatch:
    """
    Pick the accepted candidate for an ingredient and assign its tier.

    Args:
        ingredient: Parsed recipe ingredient
        ranked: Output of rank_candidates() (not mutated)
        thresholds: Tier thresholds (default: from FLAGS)
        tables: Veto tables (default: built-in gotchas)
        max_fallback: Positions past the top the veto may skip (default: FLAGS)

    Returns:
        CategorizedMatch; `best` is the accepted candidate, or the top-ranked
        one when every considered candidate was vetoed.
    """
    thresholds = thresholds or FLAGS.thresholds()
    if max_fallback is None:
        max_fallback = FLAGS.veto_fallback_depth

    if not ranked:
        return CategorizedMatch(auto_match=None, probable_match=None, best=None)

    accepted, rejections = select_acceptable_candidate(
        ingredient, ranked, tables=tables, max_fallback=max_fallback
    )

    if accepted is None:
        if verbose_enabled():
            print(f"[MATCH] '{ingredient.name}': all considered candidates vetoed, "
                  f"keeping '{ranked[0].food.name}' as review suggestion")
        return CategorizedMatch(
            auto_match=None,
            probable_match=None,
            best=ranked[0],
            rejections=rejections,
        )

    if is_auto_match(accepted, thresholds):
        return CategorizedMatch(
            auto_match=accepted, probable_match=None, best=accepted, rejections=rejections
        )

    if accepted.confidence >= thresholds.soft:
        return CategorizedMatch(
            auto_match=None, probable_match=accepted, best=accepted, rejections=rejections
        )

    return CategorizedMatch(
        auto_match=None, probable_match=None, best=accepted, rejections=rejections
    )

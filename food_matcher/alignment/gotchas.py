"""
Match gotchas: known bad-match patterns between ingredients and catalog foods.

A gotcha is a pairing that scores well on text signals but is semantically
wrong ("salt" → "Salted Butter", "beef stock" → "Ground Beef"). The tables
below are data: adding a pattern is adding a record, not a branch.

Exposed checks:
- check_problematic_match(): veto verdict from the two tables
- passes_validity_checks(): advisory confidence-gated filter on top of the tables
- select_acceptable_candidate(): fallback walk over a ranked list (default: one step)
- validate_aliases() / filter_modifier_aliases(): reject modifier-word aliases
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config.feature_flags import verbose_enabled
from ..types import FoodMatchCandidate, ParsedIngredient, VetoVerdict

WORD_SPLIT_RE = re.compile(r"\s+")

# Confidence ceilings below which the advisory validity checks apply
SINGLE_WORD_VALIDITY_CEILING = 90
MULTI_WORD_VALIDITY_CEILING = 85


@dataclass(frozen=True)
class SingleWordPattern:
    """Single-word ingredient that must not match foods containing `excludes`."""
    ingredient: str
    excludes: Tuple[str, ...]
    reason: str


@dataclass(frozen=True)
class SemanticMismatch:
    """Ingredient containing all `ingredient` words must not match `excludes`."""
    ingredient: Tuple[str, ...]
    excludes: Tuple[str, ...]
    reason: str


@dataclass
class VetoTables:
    """Pattern tables consulted by the veto engine."""
    single_word: List[SingleWordPattern] = field(default_factory=list)
    semantic: List[SemanticMismatch] = field(default_factory=list)


DEFAULT_SINGLE_WORD_PATTERNS: List[SingleWordPattern] = [
    SingleWordPattern(
        "salt", ("butter", "pepper"),
        "Salt is a modifier in compound foods, not the food itself",
    ),
    SingleWordPattern(
        "pepper", ("bell", "red", "green", "yellow", "orange", "black", "white"),
        "Pepper alone refers to spice, not bell peppers",
    ),
    SingleWordPattern(
        "stock", ("ground", "beef", "chicken", "pork", "vegetable"),
        "Stock refers to broth, not ground meat stock",
    ),
    SingleWordPattern(
        "leaf", ("lettuce", "cabbage", "spinach"),
        "Leaf is a descriptor, not a food name",
    ),
    SingleWordPattern(
        "ground", ("beef", "turkey", "chicken", "pork"),
        "Ground is a preparation method, not a food",
    ),
    SingleWordPattern(
        "butter", ("peanut", "almond", "cashew"),
        "Butter alone refers to dairy butter, not nut butters",
    ),
]

DEFAULT_SEMANTIC_MISMATCHES: List[SemanticMismatch] = [
    SemanticMismatch(
        ("beef", "stock"), ("ground", "steak", "roast"),
        "Beef stock is broth, not ground beef",
    ),
    SemanticMismatch(
        ("bay", "leaf"), ("lettuce",),
        "Bay leaf is a spice, not lettuce",
    ),
    SemanticMismatch(
        ("thyme", "leaf"), ("lettuce",),
        "Thyme leaf is an herb, not lettuce",
    ),
    SemanticMismatch(
        ("chicken", "stock"), ("breast", "thigh", "wing"),
        "Chicken stock is broth, not chicken parts",
    ),
]

DEFAULT_VETO_TABLES = VetoTables(
    single_word=DEFAULT_SINGLE_WORD_PATTERNS,
    semantic=DEFAULT_SEMANTIC_MISMATCHES,
)

# Adjectives/preparations that appear inside compound names ("salted butter")
# and must never stand alone as an alias.
MODIFIER_WORDS = frozenset({
    "salted", "unsalted", "ground", "whole", "chopped", "diced", "sliced",
    "minced", "grated", "shredded", "fresh", "frozen", "canned", "dried",
    "raw", "cooked", "roasted", "baked", "grilled", "fried", "boiled",
    "steamed", "sauteed", "powdered", "halved", "quartered", "black",
    "white", "red", "green", "yellow", "orange", "sweet", "sour", "hot",
    "mild", "spicy",
})


def veto_tables_from_config(gotchas: Dict[str, Any]) -> VetoTables:
    """
    Build veto tables from a loaded match_gotchas.yml mapping.

    Expected shape:
        single_word_patterns: [{ingredient: str, excludes: [str], reason: str}]
        semantic_mismatches: [{ingredient: [str], excludes: [str], reason: str}]

    Raises:
        ValueError: If a record is missing fields or has the wrong types
    """
    single_word = []
    for record in gotchas.get("single_word_patterns") or []:
        word = record.get("ingredient")
        excludes = record.get("excludes")
        if not isinstance(word, str) or not isinstance(excludes, list):
            raise ValueError(f"Malformed single_word_patterns record: {record}")
        single_word.append(SingleWordPattern(
            ingredient=word.lower().strip(),
            excludes=tuple(str(e).lower() for e in excludes),
            reason=str(record.get("reason", "")),
        ))

    semantic = []
    for record in gotchas.get("semantic_mismatches") or []:
        words = record.get("ingredient")
        excludes = record.get("excludes")
        if not isinstance(words, list) or not isinstance(excludes, list):
            raise ValueError(f"Malformed semantic_mismatches record: {record}")
        semantic.append(SemanticMismatch(
            ingredient=tuple(str(w).lower() for w in words),
            excludes=tuple(str(e).lower() for e in excludes),
            reason=str(record.get("reason", "")),
        ))

    return VetoTables(single_word=single_word, semantic=semantic)


def _words(value: str) -> List[str]:
    return [w for w in WORD_SPLIT_RE.split(value) if w]


def _matching_single_word_pattern(
    word: str,
    candidate_name: str,
    patterns: Iterable[SingleWordPattern]
) -> Optional[SingleWordPattern]:
    for pattern in patterns:
        if word == pattern.ingredient and any(ex in candidate_name for ex in pattern.excludes):
            return pattern
    return None


def _matching_semantic_mismatch(
    ingredient_name: str,
    candidate_name: str,
    mismatches: Iterable[SemanticMismatch]
) -> Optional[SemanticMismatch]:
    for mismatch in mismatches:
        if (all(w in ingredient_name for w in mismatch.ingredient)
                and any(ex in candidate_name for ex in mismatch.excludes)):
            return mismatch
    return None


def check_problematic_match(
    ingredient: ParsedIngredient,
    candidate: FoodMatchCandidate,
    tables: Optional[VetoTables] = None
) -> VetoVerdict:
    """
    Check whether an ingredient → food pairing hits a known gotcha.

    Args:
        ingredient: Parsed recipe ingredient
        candidate: Scored catalog candidate
        tables: Pattern tables (default: DEFAULT_VETO_TABLES)

    Returns:
        VetoVerdict; pattern is "<ingredient> -> <candidate name>"

    Examples:
        "salt" vs "Salted Butter"     → problematic (salt -> salted butter)
        "beef stock" vs "Ground Beef" → problematic (beef stock -> ground beef)
        "salt" vs "Table Salt"        → ok
    """
    tables = tables or DEFAULT_VETO_TABLES
    ingredient_name = (ingredient.name or "").lower().strip()
    candidate_name = (candidate.food.name or "").lower().strip()
    ingredient_words = _words(ingredient_name)

    if len(ingredient_words) == 1:
        pattern = _matching_single_word_pattern(
            ingredient_words[0], candidate_name, tables.single_word
        )
        if pattern:
            return VetoVerdict(
                is_problematic=True,
                reason=pattern.reason,
                pattern=f"{pattern.ingredient} -> {candidate_name}",
            )

    mismatch = _matching_semantic_mismatch(ingredient_name, candidate_name, tables.semantic)
    if mismatch:
        return VetoVerdict(
            is_problematic=True,
            reason=mismatch.reason,
            pattern=f"{ingredient_name} -> {candidate_name}",
        )

    return VetoVerdict(is_problematic=False)


# Alias kept for callers that use the shorter name
is_problematic = check_problematic_match


def passes_validity_checks(
    ingredient: ParsedIngredient,
    candidate: FoodMatchCandidate,
    tables: Optional[VetoTables] = None
) -> bool:
    """
    Advisory confidence-gated filter layered on the veto tables.

    Rejects:
    - single-word ingredient vs multi-word candidate below 90 confidence, when
      the candidate contains the word and a single-word pattern applies
    - multi-word ingredient whose words all appear in a longer candidate name
      below 85 confidence, when a semantic-mismatch pattern applies
    """
    tables = tables or DEFAULT_VETO_TABLES
    ingredient_name = (ingredient.name or "").lower().strip()
    candidate_name = (candidate.food.name or "").lower().strip()
    ingredient_words = _words(ingredient_name)
    candidate_words = _words(candidate_name)

    if len(ingredient_words) == 1 and len(candidate_words) > 1:
        word = ingredient_words[0]
        if (candidate.confidence < SINGLE_WORD_VALIDITY_CEILING
                and word in candidate_name
                and _matching_single_word_pattern(word, candidate_name, tables.single_word)):
            return False

    if len(ingredient_words) > 1 and len(candidate_name) > len(ingredient_name):
        if (candidate.confidence < MULTI_WORD_VALIDITY_CEILING
                and all(w in candidate_name for w in ingredient_words)
                and _matching_semantic_mismatch(ingredient_name, candidate_name, tables.semantic)):
            return False

    return True


def evaluate_candidate(
    ingredient: ParsedIngredient,
    candidate: FoodMatchCandidate,
    tables: Optional[VetoTables] = None
) -> VetoVerdict:
    """Veto verdict combining the pattern tables and the validity checks."""
    verdict = check_problematic_match(ingredient, candidate, tables)
    if verdict.is_problematic:
        return verdict

    if not passes_validity_checks(ingredient, candidate, tables):
        return VetoVerdict(
            is_problematic=True,
            reason="Low-confidence match on a known mismatch pattern",
            pattern=f"{(ingredient.name or '').lower().strip()} -> {candidate.food.name.lower().strip()}",
        )

    return verdict


def select_acceptable_candidate(
    ingredient: ParsedIngredient,
    ranked: Sequence[FoodMatchCandidate],
    tables: Optional[VetoTables] = None,
    max_fallback: int = 1
) -> Tuple[Optional[FoodMatchCandidate], List[Tuple[FoodMatchCandidate, VetoVerdict]]]:
    """
    Walk the ranked list from the top, skipping vetoed candidates.

    At most `max_fallback` positions past the top are considered, so with the
    default of 1 a vetoed top and vetoed runner-up leave the ingredient with
    no acceptable match even if a valid third candidate exists.

    Returns:
        (accepted candidate or None, list of (rejected candidate, verdict))
    """
    rejections: List[Tuple[FoodMatchCandidate, VetoVerdict]] = []

    for candidate in list(ranked)[:max(0, max_fallback) + 1]:
        verdict = evaluate_candidate(ingredient, candidate, tables)
        if not verdict.is_problematic:
            return candidate, rejections

        rejections.append((candidate, verdict))
        if verbose_enabled():
            print(f"[VETO] Rejected '{candidate.food.name}' for '{ingredient.name}': "
                  f"{verdict.reason} ({verdict.pattern})")

    return None, rejections


def is_modifier_word(word: str) -> bool:
    """True if `word` is a modifier that shouldn't be used as an alias."""
    return word.lower().strip() in MODIFIER_WORDS


def filter_modifier_aliases(aliases: Iterable[str], modifiers=MODIFIER_WORDS) -> List[str]:
    """
    Drop aliases that are a single modifier word or start with one.

    Examples:
        >>> filter_modifier_aliases(["salted", "butter", "ground beef", "olive oil"])
        ['butter', 'olive oil']
    """
    kept = []
    for alias in aliases:
        words = _words(alias.lower())
        if words and words[0] in modifiers:
            continue
        kept.append(alias)
    return kept


@dataclass
class AliasValidation:
    valid: List[str]
    rejected: List[str]
    reasons: Dict[str, str]


def validate_aliases(aliases: Iterable[str]) -> AliasValidation:
    """Split aliases into valid and rejected, recording why each was rejected."""
    valid: List[str] = []
    rejected: List[str] = []
    reasons: Dict[str, str] = {}

    for alias in aliases:
        words = _words(alias.lower())

        if len(words) == 1 and is_modifier_word(words[0]):
            rejected.append(alias)
            reasons[alias] = f"Single-word modifier: {words[0]}"
            continue

        if len(words) > 1 and is_modifier_word(words[0]):
            rejected.append(alias)
            reasons[alias] = f"Starts with modifier: {words[0]}"
            continue

        valid.append(alias)

    return AliasValidation(valid=valid, rejected=rejected, reasons=reasons)

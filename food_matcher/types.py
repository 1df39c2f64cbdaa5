"""
Type definitions for ingredient → food catalog matching.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, FrozenSet, Tuple


# Signal kinds emitted by the scorers
EXACT_NAME = "exact-name"
ALIAS_EXACT = "alias-exact"
PREFIX_MATCH = "prefix-match"
TOKEN_OVERLAP = "token-overlap"
ALIAS_TOKEN_OVERLAP = "alias-token-overlap"
FUZZY_SIMILARITY = "fuzzy-similarity"
EMBEDDING_SIMILARITY = "embedding-similarity"

REASON_TYPES = (
    EXACT_NAME,
    ALIAS_EXACT,
    PREFIX_MATCH,
    TOKEN_OVERLAP,
    ALIAS_TOKEN_OVERLAP,
    FUZZY_SIMILARITY,
    EMBEDDING_SIMILARITY,
)


@dataclass(frozen=True)
class ParsedIngredient:
    """One recipe line after quantity/unit parsing."""
    raw: str
    name: str                                   # Food-name portion (e.g., "chicken breast")
    quantity: Optional[float] = None
    unit: Optional[str] = None
    descriptors: Tuple[str, ...] = ()           # Preparation words ("chopped", "to taste")
    normalized_tokens: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class CatalogEntry:
    """Reference food record (food lookup item)."""
    id: str
    name: str
    details: Optional[str] = None               # Secondary text split out of a compound name
    aliases: Tuple[str, ...] = ()


@dataclass
class IndexedCandidate:
    """Searchable form of a catalog entry, rebuilt for each ranking pass."""
    entry: CatalogEntry
    normalized_name: str
    token_set: FrozenSet[str]
    alias_set: FrozenSet[str]
    alias_token_sets: List[FrozenSet[str]] = field(default_factory=list)


@dataclass
class MatchReason:
    """One signal's verdict for an (ingredient, candidate) pair."""
    type: str
    score: int
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FoodMatchCandidate:
    """Scored pairing of an ingredient with a catalog entry."""
    food: CatalogEntry
    confidence: int
    reasons: List[MatchReason]

    @property
    def has_perfect_token_match(self) -> bool:
        return any(
            r.type == TOKEN_OVERLAP and r.metadata.get("perfect_match") is True
            for r in self.reasons
        )


@dataclass
class VetoVerdict:
    """Answer to "is this pairing a known-bad match"."""
    is_problematic: bool
    reason: Optional[str] = None
    pattern: Optional[str] = None


class MatchTier(str, Enum):
    AUTO_MATCH = "auto-match"
    PROBABLE = "probable"
    PENDING_REVIEW = "pending-review"


@dataclass(frozen=True)
class MatchThresholds:
    """Categorizer thresholds (0-100)."""
    hard: int = 85
    soft: int = 60
    perfect_token_floor: int = 80


@dataclass
class CategorizedMatch:
    """Outcome of veto fallback + tier categorization for one ingredient."""
    auto_match: Optional[FoodMatchCandidate]
    probable_match: Optional[FoodMatchCandidate]
    best: Optional[FoodMatchCandidate]
    rejections: List[Tuple[FoodMatchCandidate, VetoVerdict]] = field(default_factory=list)

    @property
    def tier(self) -> MatchTier:
        if self.auto_match is not None:
            return MatchTier.AUTO_MATCH
        if self.probable_match is not None:
            return MatchTier.PROBABLE
        return MatchTier.PENDING_REVIEW

    @property
    def chosen(self) -> Optional[FoodMatchCandidate]:
        return self.auto_match or self.probable_match or self.best


@dataclass
class MatchedIngredient:
    """Ingredient with its categorized match and top candidates."""
    ingredient: ParsedIngredient
    tier: MatchTier
    food_id: Optional[str]                      # Set only for auto-matches
    match: Optional[FoodMatchCandidate]
    candidates: List[FoodMatchCandidate] = field(default_factory=list)


@dataclass
class ReviewQueueItem:
    """Ingredient awaiting manual review, with a suggested catalog entry."""
    ingredient: ParsedIngredient
    candidate: Optional[FoodMatchCandidate] = None
    suggested_name: Optional[str] = None
    suggested_aliases: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        candidate = None
        if self.candidate is not None:
            candidate = {
                "food_id": self.candidate.food.id,
                "food_name": self.candidate.food.name,
                "confidence": self.candidate.confidence,
            }
        return {
            "ingredient": {
                "raw": self.ingredient.raw,
                "name": self.ingredient.name,
                "quantity": self.ingredient.quantity,
                "unit": self.ingredient.unit,
            },
            "candidate": candidate,
            "suggested_name": self.suggested_name,
            "suggested_aliases": list(self.suggested_aliases),
        }


@dataclass
class IntakeOutcome:
    """Result of matching a batch of parsed ingredients."""
    ingredients: List[MatchedIngredient]
    matches: List[MatchedIngredient]
    probables: List[MatchedIngredient]
    pending_review: List[ReviewQueueItem]
    unmatched: List[ParsedIngredient]

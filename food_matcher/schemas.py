"""
Pydantic schemas for the matcher's JSON boundary (CLI input/output).

The engine itself works on the dataclasses in food_matcher.types; the
converters below translate at the edge.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .normalizers.food_name_formatter import split_food_name_and_details
from .types import (
    CatalogEntry,
    FoodMatchCandidate,
    IntakeOutcome,
    MatchedIngredient,
    ParsedIngredient,
    ReviewQueueItem,
)


class IngredientIn(BaseModel):
    """Parsed recipe ingredient."""
    raw: str = ""
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    descriptors: List[str] = Field(default_factory=list)
    normalized_tokens: Optional[List[str]] = None

    def to_parsed(self) -> ParsedIngredient:
        return ParsedIngredient(
            raw=self.raw or self.name,
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            descriptors=tuple(self.descriptors),
            normalized_tokens=tuple(self.normalized_tokens) if self.normalized_tokens is not None else None,
        )


class CatalogEntryIn(BaseModel):
    """Catalog food record."""
    id: str
    name: str
    details: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)

    def to_entry(self, split_details: bool = False) -> CatalogEntry:
        """
        Convert to an engine entry. With split_details, a comma-separated
        description ("Almonds, raw, whole") becomes name + details.
        """
        name, details = self.name, self.details
        if split_details and details is None:
            name, details = split_food_name_and_details(self.name)
        return CatalogEntry(id=self.id, name=name, details=details, aliases=tuple(self.aliases))


class MatchRequest(BaseModel):
    """Batch of ingredients to match against one catalog snapshot."""
    ingredients: List[IngredientIn]
    catalog: List[CatalogEntryIn] = Field(default_factory=list)
    max_candidates: Optional[int] = None


class MatchReasonOut(BaseModel):
    type: str
    score: int
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CandidateOut(BaseModel):
    food_id: str
    food_name: str
    confidence: int
    reasons: List[MatchReasonOut] = Field(default_factory=list)


class MatchedIngredientOut(BaseModel):
    """Ingredient with its tier, chosen match and top candidates."""
    raw: str
    name: str
    tier: str
    food_id: Optional[str] = None
    match: Optional[CandidateOut] = None
    candidates: List[CandidateOut] = Field(default_factory=list)


class ReviewItemOut(BaseModel):
    name: str
    raw: str
    candidate: Optional[CandidateOut] = None
    suggested_name: Optional[str] = None
    suggested_aliases: List[str] = Field(default_factory=list)


class MatchResponse(BaseModel):
    """Complete match result with version tracking."""
    ingredients: List[MatchedIngredientOut]
    summary: Dict[str, int] = Field(default_factory=dict)
    pending_review: List[ReviewItemOut] = Field(default_factory=list)

    # Version tracking
    config_version: str
    code_git_sha: str


def candidate_to_out(candidate: Optional[FoodMatchCandidate]) -> Optional[CandidateOut]:
    if candidate is None:
        return None
    return CandidateOut(
        food_id=candidate.food.id,
        food_name=candidate.food.name,
        confidence=candidate.confidence,
        reasons=[
            MatchReasonOut(type=r.type, score=r.score, metadata=dict(r.metadata))
            for r in candidate.reasons
        ],
    )


def matched_to_out(matched: MatchedIngredient) -> MatchedIngredientOut:
    return MatchedIngredientOut(
        raw=matched.ingredient.raw,
        name=matched.ingredient.name,
        tier=matched.tier.value,
        food_id=matched.food_id,
        match=candidate_to_out(matched.match),
        candidates=[candidate_to_out(c) for c in matched.candidates],
    )


def review_item_to_out(item: ReviewQueueItem) -> ReviewItemOut:
    return ReviewItemOut(
        name=item.ingredient.name,
        raw=item.ingredient.raw,
        candidate=candidate_to_out(item.candidate),
        suggested_name=item.suggested_name,
        suggested_aliases=list(item.suggested_aliases),
    )


def build_response(
    outcome: IntakeOutcome,
    config_version: str,
    code_git_sha: str
) -> MatchResponse:
    """Assemble the JSON response for an intake outcome."""
    return MatchResponse(
        ingredients=[matched_to_out(m) for m in outcome.ingredients],
        summary={
            "total": len(outcome.ingredients),
            "auto_matched": len(outcome.matches),
            "probable": len(outcome.probables),
            "pending_review": len(outcome.pending_review),
            "unmatched": len(outcome.unmatched),
        },
        pending_review=[review_item_to_out(item) for item in outcome.pending_review],
        config_version=config_version,
        code_git_sha=code_git_sha,
    )

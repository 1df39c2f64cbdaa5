"""
Pytest configuration for matcher tests.
"""
import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from food_matcher.types import CatalogEntry, FoodMatchCandidate, MatchReason, ParsedIngredient


def make_ingredient(name, **kwargs):
    """ParsedIngredient with raw defaulting to the name."""
    kwargs.setdefault("raw", name)
    return ParsedIngredient(name=name, **kwargs)


def make_candidate(food_id, name, confidence, reasons=None, aliases=()):
    """Hand-built scored candidate for veto/categorizer tests."""
    if reasons is None:
        reasons = [MatchReason("token-overlap", confidence, {"coverage": 1.0})]
    return FoodMatchCandidate(
        food=CatalogEntry(id=food_id, name=name, aliases=tuple(aliases)),
        confidence=confidence,
        reasons=reasons,
    )


@pytest.fixture
def sample_catalog():
    """Small catalog covering the common gotchas."""
    return [
        CatalogEntry(id="celery", name="Celery"),
        CatalogEntry(id="table-salt", name="Table Salt"),
        CatalogEntry(id="salted-butter", name="Salted Butter"),
        CatalogEntry(id="beef-stock", name="Beef Stock"),
        CatalogEntry(id="ground-beef", name="Ground Beef"),
    ]


@pytest.fixture(autouse=True)
def quiet_matcher(monkeypatch):
    """Keep tests independent of the developer's shell environment."""
    monkeypatch.delenv("MATCH_VERBOSE", raising=False)
    monkeypatch.delenv("EMBEDDING_PROVIDER", raising=False)

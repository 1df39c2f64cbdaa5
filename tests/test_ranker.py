"""
Test candidate ranking end to end (normalize → index → score → sort).
"""
import sys
from pathlib import Path

repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from food_matcher.adapters.embedding_gateway import EmbeddingCache, SentenceTransformerEmbeddingGateway
from food_matcher.alignment.categorizer import categorize
from food_matcher.alignment.ranker import best_candidate, rank_candidates
from food_matcher.types import CatalogEntry, MatchThresholds, MatchTier

from conftest import make_ingredient

THRESHOLDS = MatchThresholds(hard=85, soft=60)


class StubGateway:
    """Returns fixed vectors and counts calls."""

    def __init__(self, ingredient_vectors=None, food_vectors=None):
        self.ingredient_vectors = ingredient_vectors or {}
        self.food_vectors = food_vectors or {}
        self.ingredient_calls = 0
        self.food_calls = 0

    def embed_ingredient(self, ingredient):
        self.ingredient_calls += 1
        return self.ingredient_vectors.get(ingredient.name)

    def embed_food(self, food):
        self.food_calls += 1
        return self.food_vectors.get(food.id)


class UnloadableModelGateway(SentenceTransformerEmbeddingGateway):
    """Local model whose weights cannot be loaded."""

    def __init__(self):
        super().__init__(model_name="missing/model")
        self.load_attempts = 0

    def _load_model(self):
        self.load_attempts += 1
        raise OSError("model weights not found")


class TestRankingProperties:
    """Ordering and value-range guarantees."""

    def test_exact_name_ranks_first(self):
        catalog = [
            CatalogEntry("brown", "Brown Rice"),
            CatalogEntry("wild", "Wild Rice"),
            CatalogEntry("rice", "Rice"),
        ]
        ranked = rank_candidates(make_ingredient("rice"), catalog)
        assert ranked[0].food.id == "rice"
        assert ranked[0].confidence == 100

    def test_confidences_non_increasing(self, sample_catalog):
        for name in ("celery", "salt", "beef stock", "ground beef"):
            ranked = rank_candidates(make_ingredient(name), sample_catalog)
            confidences = [c.confidence for c in ranked]
            assert confidences == sorted(confidences, reverse=True), f"Unsorted ranking for {name}"

    def test_every_candidate_has_reasons_and_valid_confidence(self, sample_catalog):
        for name in ("celery", "salt", "beef stock"):
            for candidate in rank_candidates(make_ingredient(name), sample_catalog):
                assert candidate.reasons, f"{candidate.food.name} has no reasons"
                assert 0 < candidate.confidence <= 100

    def test_ties_keep_catalog_order(self):
        catalog = [CatalogEntry("tart", "Apple Tart"), CatalogEntry("pie", "Apple Pie")]
        ranked = rank_candidates(make_ingredient("apple"), catalog)
        assert [c.food.id for c in ranked] == ["tart", "pie"]
        assert ranked[0].confidence == ranked[1].confidence

    def test_empty_catalog(self):
        assert rank_candidates(make_ingredient("celery"), []) == []
        assert best_candidate(make_ingredient("celery"), []) is None

    def test_empty_ingredient_name(self, sample_catalog):
        assert rank_candidates(make_ingredient("   "), sample_catalog) == []

    def test_catalog_not_mutated(self, sample_catalog):
        before = list(sample_catalog)
        rank_candidates(make_ingredient("salt"), sample_catalog)
        assert sample_catalog == before


class TestScenarios:
    """Known ingredient → food outcomes."""

    def test_celery_perfect_match(self):
        catalog = [CatalogEntry("celery", "Celery"), CatalogEntry("celery-salt", "Celery Salt")]
        best = best_candidate(make_ingredient("celery"), catalog)
        assert best.food.id == "celery"
        assert best.confidence == 100
        assert best.has_perfect_token_match

    def test_chicken_breast_alias(self):
        catalog = [
            CatalogEntry("thigh", "Chicken Thigh"),
            CatalogEntry("breast", "Chicken Breast, Cooked", aliases=("chicken breast",)),
        ]
        best = best_candidate(make_ingredient("chicken breast"), catalog)
        assert best.food.id == "breast"
        assert best.confidence >= 95

    def test_beef_stock_prefers_stock(self):
        catalog = [CatalogEntry("ground-beef", "Ground Beef"), CatalogEntry("beef-stock", "Beef Stock")]
        ingredient = make_ingredient("beef stock")
        ranked = rank_candidates(ingredient, catalog)
        assert ranked[0].food.id == "beef-stock"

        result = categorize(ingredient, ranked, thresholds=THRESHOLDS)
        assert result.tier == MatchTier.AUTO_MATCH
        assert result.auto_match.food.id == "beef-stock"

    def test_salt_lands_on_table_salt(self, sample_catalog):
        ingredient = make_ingredient("salt")
        ranked = rank_candidates(ingredient, sample_catalog)
        result = categorize(ingredient, ranked, thresholds=THRESHOLDS)
        assert result.chosen.food.id == "table-salt"
        assert result.tier == MatchTier.PROBABLE, "Table Salt covers only half its tokens"


class TestEmbeddingSignal:
    """Optional embedding signal through the per-request cache."""

    def test_embedding_adds_candidate(self):
        gateway = StubGateway(
            ingredient_vectors={"zucchini": [1.0, 0.0]},
            food_vectors={"courgette": [1.0, 0.0], "rice": [0.0, 1.0]},
        )
        catalog = [CatalogEntry("rice", "Rice"), CatalogEntry("courgette", "Courgette")]
        ranked = rank_candidates(make_ingredient("zucchini"), catalog, EmbeddingCache(gateway))
        assert [c.food.id for c in ranked] == ["courgette"]
        assert ranked[0].reasons[0].type == "embedding-similarity"

    def test_no_ingredient_vector_skips_food_calls(self):
        gateway = StubGateway(food_vectors={"rice": [1.0, 0.0]})
        catalog = [CatalogEntry("rice", "Rice")]
        rank_candidates(make_ingredient("rice"), catalog, EmbeddingCache(gateway))
        assert gateway.ingredient_calls == 1
        assert gateway.food_calls == 0

    def test_cache_shared_across_ingredients(self):
        gateway = StubGateway(
            ingredient_vectors={"carrots": [1.0, 0.0], "carrot": [1.0, 0.0]},
            food_vectors={"carrot": [1.0, 0.0]},
        )
        cache = EmbeddingCache(gateway)
        catalog = [CatalogEntry("carrot", "Carrot")]
        rank_candidates(make_ingredient("carrots"), catalog, cache)
        rank_candidates(make_ingredient("carrot"), catalog, cache)
        assert gateway.ingredient_calls == 1, "Same normalized name should hit the cache"
        assert gateway.food_calls == 1

    def test_model_load_failure_ranks_without_embeddings(self):
        gateway = UnloadableModelGateway()
        ranked = rank_candidates(make_ingredient("celery"), [CatalogEntry("c", "Celery")], EmbeddingCache(gateway))

        assert ranked[0].food.id == "c"
        assert ranked[0].confidence == 100
        assert "embedding-similarity" not in [r.type for r in ranked[0].reasons]

    def test_model_load_attempted_once(self, monkeypatch, capsys):
        monkeypatch.setenv("MATCH_VERBOSE", "1")
        gateway = UnloadableModelGateway()
        catalog = [CatalogEntry("c", "Celery"), CatalogEntry("r", "Rice")]

        rank_candidates(make_ingredient("celery"), catalog, EmbeddingCache(gateway))
        rank_candidates(make_ingredient("rice"), catalog, EmbeddingCache(gateway))

        assert gateway.load_attempts == 1, "A failed load should disable the gateway"
        assert "[WARNING] Embedding model missing/model unavailable" in capsys.readouterr().out

"""
Test embedding adapters: cosine similarity, null mode, cache, provider factory.
"""
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from food_matcher.adapters.embedding_gateway import (
    EmbeddingCache,
    NullEmbeddingGateway,
    OpenAIEmbeddingGateway,
    SentenceTransformerEmbeddingGateway,
    cosine_similarity,
    create_embedding_gateway,
    food_embedding_text,
    ingredient_embedding_text,
)
from food_matcher.types import CatalogEntry

from conftest import make_ingredient


class FakeEmbeddings:
    def __init__(self, vector=None, error=None):
        self.vector = vector
        self.error = error
        self.inputs = []

    def create(self, model, input):
        self.inputs.append(input)
        if self.error:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(embedding=self.vector)])


class TestCosineSimilarity:
    def test_identical(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_length_mismatch_uses_shorter(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0]) == pytest.approx(1.0)

    def test_zero_magnitude(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
        assert cosine_similarity([], [1.0]) == 0.0


class TestEmbeddingText:
    def test_ingredient_text_includes_descriptors(self):
        ingredient = make_ingredient("onion", descriptors=("chopped", "divided"))
        assert ingredient_embedding_text(ingredient) == "onion (chopped, divided)"

    def test_food_text_includes_aliases(self):
        food = CatalogEntry("g", "Green Onion", aliases=("scallion", " "))
        assert food_embedding_text(food) == "Green Onion | scallion"


class TestEmbeddingCache:
    def test_null_gateway(self):
        cache = EmbeddingCache(NullEmbeddingGateway())
        assert cache.get_ingredient_embedding(make_ingredient("salt")) is None
        assert cache.get_food_embedding(CatalogEntry("s", "Salt")) is None

    def test_misses_are_cached(self):
        cache = EmbeddingCache()
        cache.get_ingredient_embedding(make_ingredient("salt"))
        cache.get_ingredient_embedding(make_ingredient("Salt"))
        assert cache.calls == 1
        assert len(cache) == 1

    def test_food_keyed_by_id(self):
        cache = EmbeddingCache()
        cache.get_food_embedding(CatalogEntry("ID-1", "Salt"))
        cache.get_food_embedding(CatalogEntry("id-1", "Sea Salt"))
        cache.get_food_embedding(CatalogEntry("", "Sea Salt"))
        assert cache.calls == 2


class TestOpenAIGateway:
    def test_returns_vector(self):
        embeddings = FakeEmbeddings(vector=[0.1, 0.2])
        gateway = OpenAIEmbeddingGateway(api_key="sk-test", client=SimpleNamespace(embeddings=embeddings))
        assert gateway.embed_food(CatalogEntry("c", "Celery")) == [0.1, 0.2]
        assert embeddings.inputs == ["Celery"]

    def test_provider_error_is_none(self):
        embeddings = FakeEmbeddings(error=RuntimeError("rate limited"))
        gateway = OpenAIEmbeddingGateway(api_key="sk-test", client=SimpleNamespace(embeddings=embeddings))
        assert gateway.embed_ingredient(make_ingredient("celery")) is None

    def test_model_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_EMBED_MODEL", "text-embedding-3-large")
        assert OpenAIEmbeddingGateway(api_key="sk-test").model == "text-embedding-3-large"


class TestFactory:
    def test_unset_provider(self):
        assert create_embedding_gateway() is None

    def test_openai_without_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert create_embedding_gateway("openai") is None

    def test_openai_with_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("EMBEDDING_PROVIDER", "openai")
        gateway = create_embedding_gateway()
        assert isinstance(gateway, OpenAIEmbeddingGateway)
        assert gateway.client is None, "Client should be created lazily"

    def test_sentence_transformers_is_lazy(self):
        gateway = create_embedding_gateway("sentence-transformers")
        assert isinstance(gateway, SentenceTransformerEmbeddingGateway)
        assert gateway.model is None

    def test_unknown_provider(self):
        assert create_embedding_gateway("word2vec") is None

"""
Embedding capability for the embedding-similarity signal.

The engine only needs two calls, embed_ingredient() and embed_food(), each
returning a vector or None. Providers:
- NullEmbeddingGateway: always None (first-class "no embeddings" mode)
- OpenAIEmbeddingGateway: OpenAI embeddings API
- SentenceTransformerEmbeddingGateway: local sentence-transformers model (lazy-loaded)

Provider failures are reported as None, never raised into the matcher.
EmbeddingCache memoizes vectors for the duration of one intake request.
"""
import os
from typing import Dict, Optional, Protocol, Sequence

import numpy as np

from ..config.feature_flags import verbose_enabled
from ..normalizers.ingredient_normalizer import normalize_for_comparison
from ..types import CatalogEntry, ParsedIngredient

EmbeddingVector = Sequence[float]

DEFAULT_OPENAI_EMBED_MODEL = "text-embedding-3-small"
DEFAULT_SENTENCE_TRANSFORMER_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


def cosine_similarity(a: EmbeddingVector, b: EmbeddingVector) -> float:
    """
    Cosine similarity of two vectors.

    Mismatched lengths are compared over the shorter length; a zero-magnitude
    vector (or empty input) gives 0.0.
    """
    length = min(len(a), len(b))
    if length == 0:
        return 0.0

    va = np.asarray(a[:length], dtype=float)
    vb = np.asarray(b[:length], dtype=float)

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return float(np.dot(va, vb) / (norm_a * norm_b))


def ingredient_embedding_text(ingredient: ParsedIngredient) -> str:
    """Text sent to the provider for an ingredient: "name (descriptor, ...)"."""
    name = ingredient.name.strip()
    if ingredient.descriptors:
        return f"{name} ({', '.join(ingredient.descriptors)})"
    return name


def food_embedding_text(food: CatalogEntry) -> str:
    """Text sent to the provider for a catalog entry: "name | alias | ..."."""
    parts = [food.name.strip()]
    parts.extend(a.strip() for a in food.aliases or () if a and a.strip())
    return " | ".join(parts)


class EmbeddingGateway(Protocol):
    def embed_ingredient(self, ingredient: ParsedIngredient) -> Optional[EmbeddingVector]:
        ...

    def embed_food(self, food: CatalogEntry) -> Optional[EmbeddingVector]:
        ...


class NullEmbeddingGateway:
    """Gateway used when no embedding provider is configured."""

    def embed_ingredient(self, ingredient: ParsedIngredient) -> Optional[EmbeddingVector]:
        return None

    def embed_food(self, food: CatalogEntry) -> Optional[EmbeddingVector]:
        return None


class OpenAIEmbeddingGateway:
    """OpenAI embeddings API; the client is created on first use."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client=None):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model or os.getenv("OPENAI_EMBED_MODEL", DEFAULT_OPENAI_EMBED_MODEL)
        self.client = client

    def _get_client(self):
        if self.client is None:
            from openai import OpenAI
            self.client = OpenAI(api_key=self.api_key)
        return self.client

    def _embed(self, text: str) -> Optional[EmbeddingVector]:
        if not text:
            return None
        try:
            response = self._get_client().embeddings.create(model=self.model, input=text)
            return list(response.data[0].embedding)
        except Exception as e:
            if verbose_enabled():
                print(f"[WARNING] OpenAI embedding failed for '{text}': {e}")
            return None

    def embed_ingredient(self, ingredient: ParsedIngredient) -> Optional[EmbeddingVector]:
        return self._embed(ingredient_embedding_text(ingredient))

    def embed_food(self, food: CatalogEntry) -> Optional[EmbeddingVector]:
        return self._embed(food_embedding_text(food))


class SentenceTransformerEmbeddingGateway:
    """Local sentence-transformers model, loaded on first use."""

    def __init__(self, model_name: str = DEFAULT_SENTENCE_TRANSFORMER_MODEL):
        self.model_name = model_name
        self.model = None
        self._load_failed = False

    def _load_model(self):
        """Lazy-load sentence-transformer model."""
        if self.model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError:
                raise ImportError(
                    "sentence-transformers not installed. "
                    "Install with: pip install food-matcher[semantic]"
                )
            self.model = SentenceTransformer(self.model_name)
            if verbose_enabled():
                print(f"[EMBED] Loaded model: {self.model_name}")

    def _embed(self, text: str) -> Optional[EmbeddingVector]:
        if not text or self._load_failed:
            return None

        try:
            self._load_model()
        except Exception as e:
            # Not retried for the lifetime of this gateway
            self._load_failed = True
            if verbose_enabled():
                print(f"[WARNING] Embedding model {self.model_name} unavailable, embeddings disabled: {e}")
            return None

        try:
            vector = self.model.encode(text, convert_to_numpy=True)
        except Exception as e:
            if verbose_enabled():
                print(f"[WARNING] Embedding failed for '{text}': {e}")
            return None
        return vector.tolist()

    def embed_ingredient(self, ingredient: ParsedIngredient) -> Optional[EmbeddingVector]:
        return self._embed(ingredient_embedding_text(ingredient))

    def embed_food(self, food: CatalogEntry) -> Optional[EmbeddingVector]:
        return self._embed(food_embedding_text(food))


class EmbeddingCache:
    """
    Per-request memo over an EmbeddingGateway.

    Keys:
        ingredient:<normalized ingredient name>
        food:<normalized food id, else normalized food name>

    A provider miss (None) is cached too, so each key costs at most one call.
    """

    def __init__(self, gateway: Optional[EmbeddingGateway] = None):
        self.gateway = gateway or NullEmbeddingGateway()
        self._vectors: Dict[str, Optional[EmbeddingVector]] = {}
        self.calls = 0

    def __len__(self) -> int:
        return len(self._vectors)

    def _lookup(self, key: str, fetch) -> Optional[EmbeddingVector]:
        if key in self._vectors:
            return self._vectors[key]
        self.calls += 1
        vector = fetch()
        self._vectors[key] = vector
        return vector

    def get_ingredient_embedding(self, ingredient: ParsedIngredient) -> Optional[EmbeddingVector]:
        key = f"ingredient:{normalize_for_comparison(ingredient.name)}"
        return self._lookup(key, lambda: self.gateway.embed_ingredient(ingredient))

    def get_food_embedding(self, food: CatalogEntry) -> Optional[EmbeddingVector]:
        food_key = (food.id or "").strip().lower() or normalize_for_comparison(food.name)
        key = f"food:{food_key}"
        return self._lookup(key, lambda: self.gateway.embed_food(food))


def create_embedding_gateway(provider: Optional[str] = None) -> Optional[EmbeddingGateway]:
    """
    Build a gateway from EMBEDDING_PROVIDER ("openai" | "sentence-transformers").

    Returns None when no provider is configured or OpenAI has no API key.
    """
    provider = (provider or os.getenv("EMBEDDING_PROVIDER", "")).strip().lower()

    if not provider or provider in ("none", "null"):
        return None

    if provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key or api_key.startswith("your_"):
            if verbose_enabled():
                print("[WARNING] EMBEDDING_PROVIDER=openai but OPENAI_API_KEY is not set; embeddings disabled")
            return None
        return OpenAIEmbeddingGateway(api_key=api_key)

    if provider in ("sentence-transformers", "sentence_transformers", "local"):
        model_name = os.getenv("SENTENCE_TRANSFORMER_MODEL", DEFAULT_SENTENCE_TRANSFORMER_MODEL)
        return SentenceTransformerEmbeddingGateway(model_name=model_name)

    if verbose_enabled():
        print(f"[WARNING] Unknown EMBEDDING_PROVIDER '{provider}'; embeddings disabled")
    return None

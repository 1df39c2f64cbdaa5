"""
Manual-review queue for ingredients that were not auto-matched.

Items accumulate in memory; flush() hands back a snapshot and, when a gateway
is configured, persists it (JsonlReviewQueueGateway appends one JSON line per
item).
"""
import json
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from ..config.feature_flags import verbose_enabled
from ..normalizers.food_name_formatter import extract_aliases, format_food_name
from ..types import FoodMatchCandidate, ParsedIngredient, ReviewQueueItem


class ReviewQueueGateway(Protocol):
    def persist(self, items: Sequence[ReviewQueueItem]) -> None:
        ...


class JsonlReviewQueueGateway:
    """Append review items to a JSON Lines file."""

    def __init__(self, path):
        self.path = Path(path)

    def persist(self, items: Sequence[ReviewQueueItem]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a") as f:
            for item in items:
                f.write(json.dumps(item.to_dict()) + "\n")

        if verbose_enabled():
            print(f"[INTAKE] Persisted {len(items)} review items to {self.path}")


def build_review_item(
    ingredient: ParsedIngredient,
    candidate: Optional[FoodMatchCandidate] = None
) -> ReviewQueueItem:
    """Review item with a suggested catalog name and aliases for the ingredient."""
    suggested_name = format_food_name(ingredient.name) or None
    aliases = None
    if suggested_name:
        aliases = extract_aliases(suggested_name, ingredient.normalized_tokens)

    return ReviewQueueItem(
        ingredient=ingredient,
        candidate=candidate,
        suggested_name=suggested_name,
        suggested_aliases=aliases or [],
    )


class ReviewQueue:
    """In-memory review queue with optional persistence on flush."""

    def __init__(self, gateway: Optional[ReviewQueueGateway] = None):
        self.gateway = gateway
        self._items: List[ReviewQueueItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def enqueue(
        self,
        ingredient: ParsedIngredient,
        candidate: Optional[FoodMatchCandidate] = None
    ) -> ReviewQueueItem:
        item = build_review_item(ingredient, candidate)
        self._items.append(item)
        return item

    def flush(self) -> List[ReviewQueueItem]:
        """Return queued items and clear the queue, persisting through the gateway."""
        snapshot = list(self._items)
        self._items.clear()

        if self.gateway is not None and snapshot:
            self.gateway.persist(snapshot)

        return snapshot

"""
Candidate indexer: catalog entries → searchable IndexedCandidate records.

Pure and stateless; rebuilt for every ranking request so there is no shared
cache to invalidate when the catalog changes.
"""
from typing import Iterable, List

from ..normalizers.ingredient_normalizer import normalize_ingredient_name
from ..types import CatalogEntry, IndexedCandidate


def index_entry(entry: CatalogEntry) -> IndexedCandidate:
    """
    Normalize one catalog entry's name and aliases.

    Aliases that normalize to nothing are skipped silently.
    """
    normalized = normalize_ingredient_name(entry.name)
    base_name = (normalized.base_name or entry.name.strip()).lower()

    if normalized.tokens:
        tokens = normalized.tokens
    else:
        tokens = [t for t in entry.name.lower().split() if t]

    alias_names = []
    alias_token_sets = []
    for alias in entry.aliases or ():
        normalized_alias = normalize_ingredient_name(alias)
        if normalized_alias.base_name:
            alias_names.append(normalized_alias.base_name.lower())
        if normalized_alias.tokens:
            alias_token_sets.append(frozenset(normalized_alias.tokens))

    return IndexedCandidate(
        entry=entry,
        normalized_name=base_name,
        token_set=frozenset(tokens),
        alias_set=frozenset(alias_names),
        alias_token_sets=alias_token_sets,
    )


def build_index(entries: Iterable[CatalogEntry]) -> List[IndexedCandidate]:
    """
    Index a catalog snapshot, preserving input order.

    Entries with an empty or whitespace-only name are skipped.

    Args:
        entries: Catalog entries (food lookup items)

    Returns:
        One IndexedCandidate per usable entry
    """
    indexed = []
    for entry in entries:
        if not entry.name or not entry.name.strip():
            continue
        indexed.append(index_entry(entry))
    return indexed

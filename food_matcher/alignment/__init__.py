"""Indexing, scoring, ranking, veto rules and categorization."""

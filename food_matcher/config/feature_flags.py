"""
Feature flags and match thresholds for the ingredient matcher.

Values are read from environment variables once, at import time, except
MATCH_VERBOSE which verbose_enabled() checks on every call.

Usage:
    from food_matcher.config.feature_flags import FLAGS

    if confidence >= FLAGS.match_hard_threshold:
        ...
"""
import os
from typing import Optional

from ..types import MatchThresholds

DEFAULT_HARD_MATCH_THRESHOLD = 85
DEFAULT_SOFT_MATCH_THRESHOLD = 60
DEFAULT_VETO_FALLBACK_DEPTH = 1


def parse_threshold(value: Optional[str], fallback: int) -> int:
    """
    Parse a 0-100 threshold from an environment string.

    Invalid or missing values return the fallback; valid ones are rounded
    and clamped into [0, 100].
    """
    if value is None or not value.strip():
        return fallback

    try:
        parsed = float(value)
    except ValueError:
        return fallback

    if parsed != parsed or parsed in (float("inf"), float("-inf")):
        return fallback

    if parsed <= 0:
        return 0
    return min(100, int(parsed + 0.5))


def parse_depth(value: Optional[str], fallback: int) -> int:
    """Parse a non-negative integer count; anything else returns the fallback."""
    if value is None or not value.strip():
        return fallback

    try:
        parsed = int(value.strip())
    except ValueError:
        return fallback

    if parsed < 0:
        return fallback
    return parsed


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class FeatureFlags:
    """
    Matcher flags.

    Set via environment variables or modify defaults here.
    Example: export MATCH_HARD_THRESHOLD=90
    """

    # Categorizer thresholds: confidence >= hard → auto-match, >= soft → probable
    match_hard_threshold: int = parse_threshold(
        os.getenv("MATCH_HARD_THRESHOLD"), DEFAULT_HARD_MATCH_THRESHOLD
    )
    match_soft_threshold: int = parse_threshold(
        os.getenv("MATCH_SOFT_THRESHOLD"), DEFAULT_SOFT_MATCH_THRESHOLD
    )

    # Embedding-similarity signal (only fires when a provider is configured)
    enable_embedding_signal: bool = _env_flag("ENABLE_EMBEDDING_SIGNAL", "true")

    # How many ranked positions the veto engine may fall back past the top
    veto_fallback_depth: int = parse_depth(os.getenv("VETO_FALLBACK_DEPTH"), DEFAULT_VETO_FALLBACK_DEPTH)

    @classmethod
    def thresholds(cls) -> MatchThresholds:
        """Current thresholds as a value object for the categorizer."""
        return MatchThresholds(
            hard=cls.match_hard_threshold,
            soft=cls.match_soft_threshold,
        )

    @classmethod
    def print_status(cls):
        """Print current flag status for debugging."""
        print("\n[FLAGS] ===== Matcher Flags Status =====")
        print(f"[FLAGS]   match_hard_threshold: {cls.match_hard_threshold}")
        print(f"[FLAGS]   match_soft_threshold: {cls.match_soft_threshold}")
        print(f"[FLAGS]   enable_embedding_signal: {cls.enable_embedding_signal}")
        print(f"[FLAGS]   veto_fallback_depth: {cls.veto_fallback_depth}")
        print(f"[FLAGS]   verbose (MATCH_VERBOSE): {verbose_enabled()}")
        print(f"[FLAGS] =====================================\n")


# Global instance
FLAGS = FeatureFlags()


def verbose_enabled() -> bool:
    """True when MATCH_VERBOSE=1 (checked live so tests can toggle it)."""
    return os.getenv("MATCH_VERBOSE", "0") == "1"

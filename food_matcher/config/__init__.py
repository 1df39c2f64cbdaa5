"""Runtime configuration (environment-driven feature flags)."""
from .feature_flags import FLAGS, FeatureFlags

__all__ = ["FLAGS", "FeatureFlags"]

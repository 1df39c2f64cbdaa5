"""
Text normalization for ingredient and catalog names.
"""
from .ingredient_normalizer import (
    DESCRIPTORS,
    NormalizedName,
    normalize_for_comparison,
    normalize_ingredient_name,
    singularize_token,
)
from .food_name_formatter import format_food_name, split_food_name_and_details

__all__ = [
    "DESCRIPTORS",
    "NormalizedName",
    "normalize_for_comparison",
    "normalize_ingredient_name",
    "singularize_token",
    "format_food_name",
    "split_food_name_and_details",
]

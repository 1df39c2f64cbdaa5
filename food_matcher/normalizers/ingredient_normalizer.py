"""
Ingredient name normalization.

Turns a free-text food phrase into a comparable form:
- Parenthetical content → descriptors ("butter (softened)" → "butter" + ["softened"])
- Preparation phrases → descriptors ("chopped onion" → "onion" + ["chopped"])
- Punctuation stripped, whitespace collapsed
- Tokens singularized and de-duplicated ("carrots" → "carrot")

Both recipe ingredients and catalog entries go through the same function so
that their base names and token sets are directly comparable.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

# Preparation phrases stripped from names; multi-word phrases come first so
# "finely chopped" is removed whole before "chopped" can split it.
DESCRIPTORS: List[str] = [
    "at room temperature",
    "finely chopped",
    "thinly sliced",
    "freshly ground",
    "to taste",
    "chopped",
    "sliced",
    "diced",
    "minced",
    "peeled",
    "seeded",
    "softened",
    "melted",
    "divided",
]

PARENTHETICAL_RE = re.compile(r"\(([^)]+)\)")
NON_ALPHANUMERIC_RE = re.compile(r"[^a-z0-9\s-]", re.IGNORECASE)
WHITESPACE_RE = re.compile(r"\s+")

# "-es" words ending in these only lose the trailing "s" (glasses, boxes)
_ES_KEEP_E_ENDINGS = ("ses", "xes")


@dataclass
class NormalizedName:
    """Normalized form of a food phrase."""
    base_name: str
    descriptors: List[str] = field(default_factory=list)
    tokens: List[str] = field(default_factory=list)


def normalize_whitespace(value: str) -> str:
    return WHITESPACE_RE.sub(" ", value).strip()


def singularize_token(token: str) -> str:
    """
    Strip common English plural suffixes from a single word.

    Words of three characters or fewer are returned lowercased but otherwise
    untouched ("gas", "pea").

    Examples:
        >>> singularize_token("berries")
        'berry'
        >>> singularize_token("tomatoes")
        'tomato'
        >>> singularize_token("boxes")
        'boxe'
        >>> singularize_token("swiss")
        'swiss'
    """
    lower = token.lower()

    if len(lower) <= 3:
        return lower

    if lower.endswith("ies"):
        return lower[:-3] + "y"

    if lower.endswith("ves"):
        return lower[:-3] + "f"

    if lower.endswith("es") and not lower.endswith(_ES_KEEP_E_ENDINGS):
        return lower[:-2]

    if lower.endswith("s") and not lower.endswith("ss"):
        return lower[:-1]

    return lower


def _strip_parentheticals(text: str, descriptors: List[str]) -> str:
    def _collect(match: "re.Match[str]") -> str:
        descriptor = normalize_whitespace(match.group(1))
        if descriptor:
            descriptors.append(descriptor)
        return " "

    return PARENTHETICAL_RE.sub(_collect, text)


def _strip_descriptor_phrases(
    text: str,
    descriptors: List[str],
    phrases: Sequence[str]
) -> str:
    working = text
    for phrase in phrases:
        pattern = re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE)
        hits = len(pattern.findall(working))
        if not hits:
            continue
        descriptors.extend([phrase] * hits)
        working = pattern.sub(" ", working)
    return working


def build_tokens(value: str) -> List[str]:
    """Split on spaces, singularize, de-duplicate keeping first occurrence."""
    if not value:
        return []

    tokens: List[str] = []
    seen = set()
    for part in value.split(" "):
        token = singularize_token(part)
        if token and token not in seen:
            seen.add(token)
            tokens.append(token)
    return tokens


def normalize_ingredient_name(
    text: str,
    descriptor_phrases: Optional[Sequence[str]] = None
) -> NormalizedName:
    """
    Normalize a food phrase into base name, descriptors and tokens.

    Args:
        text: Free-text phrase (e.g., "Chicken Breast (boneless), sliced")
        descriptor_phrases: Phrases to strip (default: DESCRIPTORS)

    Returns:
        NormalizedName; an empty phrase yields an empty base name.

    Examples:
        >>> normalize_ingredient_name("chopped onions").base_name
        'onion'
        >>> normalize_ingredient_name("butter (softened)").descriptors
        ['softened']
    """
    if text is None:
        text = ""

    phrases = DESCRIPTORS if descriptor_phrases is None else descriptor_phrases
    descriptors: List[str] = []

    working = _strip_parentheticals(text, descriptors)
    working = _strip_descriptor_phrases(working, descriptors, phrases)
    sanitized = normalize_whitespace(NON_ALPHANUMERIC_RE.sub(" ", working))
    tokens = build_tokens(sanitized)

    base_name = " ".join(tokens) or normalize_whitespace(sanitized or text)

    return NormalizedName(base_name=base_name, descriptors=descriptors, tokens=tokens)


def normalize_for_comparison(text: str) -> str:
    """Lowercased base name used for name-equality and prefix checks."""
    return normalize_ingredient_name(text).base_name.lower()

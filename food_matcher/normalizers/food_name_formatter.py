"""
Food name formatting for catalog entries.

Used when an unmatched ingredient is proposed as a new catalog entry and when
raw catalog descriptions ("Almonds, raw, whole") are split into a name and
secondary details.
"""
import html
import re
from typing import List, Optional, Sequence, Tuple

from ..alignment.gotchas import MODIFIER_WORDS, filter_modifier_aliases

QUOTE_STRIP_RE = re.compile(r"^[\"']|[\"']$")
WHITESPACE_RE = re.compile(r"\s+")
ACRONYM_RE = re.compile(r"^[A-Z]+$")
SPLIT_KEEP_SEPARATORS_RE = re.compile(r"(\s+|[-/])")

# Unit-like words that precede or trail the actual food ("rib celery", "garlic clove")
UNIT_LIKE_WORDS = {
    "rib", "ribs", "piece", "pieces", "piec", "stalk", "stalks", "head",
    "heads", "bulb", "bulbs", "clove", "cloves", "leaf", "leaves",
}

# Foods commonly wrapped in unit-like words
FOOD_INDICATORS = {
    "celery", "onion", "garlic", "lettuce", "cabbage", "broccoli", "cauliflower",
}

SEARCH_STOP_WORDS = {"amp", "and", "or", "with", "without", "plus", "minus"}

COMPOUND_INDICATORS = ("&", "and", "or", "plus", "/")

# First word of a comma segment that starts the preparation details
DETAIL_STARTERS = {
    "raw", "cooked", "roasted", "baked", "grilled", "fried", "boiled",
    "steamed", "sauteed", "frozen", "canned", "dried", "powdered", "ground",
    "chopped", "diced", "sliced", "minced", "grated", "shredded", "whole",
    "halved", "quartered", "salted", "unsalted", "with", "without", "fresh",
    "freshly",
}

# Aliases derived from tokens also skip the seasonings that cause bad matches
ALIAS_MODIFIER_WORDS = MODIFIER_WORDS | {"salt", "pepper"}


def clean_text(text: str) -> str:
    """Decode HTML entities, strip surrounding quotes, collapse whitespace."""
    decoded = html.unescape(text).replace("\xa0", " ")
    cleaned = QUOTE_STRIP_RE.sub("", decoded.strip()).strip()
    return WHITESPACE_RE.sub(" ", cleaned)


def _smart_capitalize(word: str) -> str:
    if not word:
        return ""
    # Keep short acronyms (BBQ, USDA)
    if len(word) <= 4 and ACRONYM_RE.match(word):
        return word
    return word[0].upper() + word[1:].lower()


def title_case(text: str) -> str:
    """
    Title-case text, preserving separators and short acronyms.

    Examples:
        >>> title_case("extra-virgin olive oil")
        'Extra-Virgin Olive Oil'
        >>> title_case("BBQ sauce")
        'BBQ Sauce'
    """
    if not text:
        return ""

    parts = []
    for part in SPLIT_KEEP_SEPARATORS_RE.split(text):
        if not part:
            continue
        if part.isspace() or part in ("-", "/"):
            parts.append(part)
        else:
            parts.append(_smart_capitalize(part))
    return "".join(parts).strip()


def _clean_food_words(name: str) -> str:
    words = [w for w in WHITESPACE_RE.split(name.lower()) if w]
    kept: List[str] = []
    found_food_indicator = False

    for i, word in enumerate(words):
        next_word = words[i + 1] if i + 1 < len(words) else None

        if word in UNIT_LIKE_WORDS:
            if next_word in FOOD_INDICATORS or found_food_indicator or not kept:
                continue

        if word in FOOD_INDICATORS:
            found_food_indicator = True
        kept.append(word)

    if not kept:
        return clean_text(name)
    return " ".join(kept)


def format_food_name(name: str) -> str:
    """
    Format an ingredient name for a catalog entry.

    Examples:
        >>> format_food_name("rib celery")
        'Celery'
        >>> format_food_name("garlic &amp; herb butter")
        'Garlic & Herb Butter'
    """
    if not name:
        return ""
    return title_case(_clean_food_words(clean_text(name)))


def clean_for_search(name: str) -> str:
    """Drop stop words, entity artifacts and 1-char words before a catalog search."""
    if not name:
        return ""
    words = [
        w for w in WHITESPACE_RE.split(name.lower())
        if w and w not in SEARCH_STOP_WORDS and len(w) > 1
    ]
    return " ".join(words)


def is_compound_ingredient(name: str) -> bool:
    """
    Heuristic: does the name describe more than one food ("salt & pepper")?
    """
    if not name:
        return False

    lower = name.lower()
    words = [w for w in WHITESPACE_RE.split(lower) if w]

    for indicator in COMPOUND_INDICATORS:
        if indicator in ("&", "/"):
            if indicator in lower:
                return True
        elif indicator in words:
            return True

    food_word_count = sum(1 for w in words if w in FOOD_INDICATORS or len(w) > 4)
    return food_word_count > 1


def split_food_name_and_details(description: str) -> Tuple[str, Optional[str]]:
    """
    Split a comma-separated catalog description into (name, details).

    Examples:
        >>> split_food_name_and_details("Almonds, raw, whole")
        ('Almonds', 'raw, whole')
        >>> split_food_name_and_details("Celery")
        ('Celery', None)
    """
    if not description:
        return "", None

    segments = [s.strip() for s in description.split(",") if s.strip()]
    if not segments:
        return description.strip(), None

    name = segments[0]
    if len(segments) == 1:
        return name, None

    detail_start = len(segments)
    for i, segment in enumerate(segments[1:], start=1):
        first_word = segment.split()[0].lower()
        if first_word in DETAIL_STARTERS:
            detail_start = i
            break

    if detail_start < len(segments):
        return name, ", ".join(segments[detail_start:])

    # No recognizable starter: everything after the first segment is detail
    return name, ", ".join(segments[1:])


def extract_aliases(
    formatted_name: str,
    normalized_tokens: Optional[Sequence[str]]
) -> Optional[List[str]]:
    """
    Derive per-token aliases for a new catalog entry.

    Returns None when tokens are absent, when they reassemble into the same
    name, or when every candidate alias is a modifier word.
    """
    if not normalized_tokens:
        return None

    token_name = format_food_name(" ".join(normalized_tokens))
    if token_name.lower() == formatted_name.lower():
        return None

    raw_aliases = [format_food_name(token) for token in normalized_tokens]
    filtered = filter_modifier_aliases(raw_aliases, modifiers=ALIAS_MODIFIER_WORDS)
    return filtered or None

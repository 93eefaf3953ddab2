"""
Etymology grouping.

Raw origin labels are bucketed in two passes:

  1. family lists map labels to French / Latin / English, and Greek,
     Italian and Old Norse to Other; unlisted labels stay None
  2. English is merged into Other

The simplified group used by the combined model keeps French and folds every
other known group into Other.

Independently, each raw label gets a frequency class: 'large' when the label
occurs more than a threshold number of times across the working table.
"""

from collections import Counter
from typing import Dict, Iterable, Optional

from conclex.features.pos import is_missing

FRENCH = 'French'
LATIN = 'Latin'
ENGLISH = 'English'
OTHER = 'Other'

FRENCH_ORIGINS = frozenset({
    'French', 'Old French', 'Middle French', 'Anglo-French', 'Anglo-Norman',
    'Old North French', 'Old Northern French', 'Norman', 'Old Provencal',
})

LATIN_ORIGINS = frozenset({
    'Latin', 'Old Latin', 'Classical Latin', 'Late Latin', 'Vulgar Latin',
    'Medieval Latin', 'Modern Latin', 'New Latin', 'Ecclesiastical Latin',
})

ENGLISH_ORIGINS = frozenset({
    'English', 'Old English', 'Middle English', 'Proto-Germanic', 'Germanic',
    'West Germanic', 'Old Saxon', 'Old Frisian', 'Middle Dutch', 'Dutch',
    'Middle Low German', 'Low German',
})

OTHER_ORIGINS = frozenset({'Greek', 'Italian', 'Old Norse'})

LARGE = 'large'
SMALL = 'small'

DEFAULT_LARGE_THRESHOLD = 100


def group_origin(raw) -> Optional[str]:
    """First pass: raw label -> French / Latin / English / Other / None."""
    if is_missing(raw):
        return None
    raw = raw.strip()
    if raw in FRENCH_ORIGINS:
        return FRENCH
    if raw in LATIN_ORIGINS:
        return LATIN
    if raw in ENGLISH_ORIGINS:
        return ENGLISH
    if raw in OTHER_ORIGINS:
        return OTHER
    return None


def merge_english(group: Optional[str]) -> Optional[str]:
    """Second pass: English joins Other."""
    if group == ENGLISH:
        return OTHER
    return group


def collapse_origin(raw) -> Optional[str]:
    """Both passes applied to a raw label."""
    return merge_english(group_origin(raw))


def simplify_group(group: Optional[str]) -> Optional[str]:
    """French vs everything else (None stays None)."""
    if group is None:
        return None
    return FRENCH if group == FRENCH else OTHER


def frequency_classes(labels: Iterable, threshold: int = DEFAULT_LARGE_THRESHOLD) -> Dict[str, str]:
    """
    Classify each raw label by how often it occurs.

    Args:
        labels: Raw labels, one per word (missing values are skipped)
        threshold: Labels with a count strictly above this are 'large'

    Returns:
        Dict mapping raw label -> 'large' or 'small'
    """
    counts = Counter(label for label in labels if not is_missing(label))
    return {
        label: LARGE if count > threshold else SMALL
        for label, count in counts.items()
    }

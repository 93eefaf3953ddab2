"""
Part-of-speech collapsing.

Closed-class tags are merged into a single 'Function' category; tags that
carry no lexical category for this analysis are dropped to None.
"""

import math
from typing import Dict, Optional, Tuple

FUNCTION_TAGS = frozenset({
    'Conjunction', 'Determiner', 'Preposition', 'Article',
    'Pronoun', 'Ex', 'To', 'Not',
})

EXCLUDED_TAGS = frozenset({
    '#N/A', 'Interjection', 'Letter', 'Name', 'Number', 'Unclassified',
})

FUNCTION = 'Function'
NOUN = 'Noun'

DISTRIBUTION_SEPARATOR = '.'


def is_missing(value) -> bool:
    """True for None, NaN and empty strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def collapse_pos(tag) -> Optional[str]:
    """Map a raw POS tag to its analysis category."""
    if is_missing(tag):
        return None
    tag = tag.strip()
    if tag in EXCLUDED_TAGS:
        return None
    if tag in FUNCTION_TAGS:
        return FUNCTION
    return tag


def collapse_distribution(value, sep: str = DISTRIBUTION_SEPARATOR) -> Optional[Tuple[str, ...]]:
    """
    Split a POS distribution string ("Noun.Verb.Adjective") into a sorted
    tuple of collapsed tags. Returns None when nothing usable remains.
    """
    if is_missing(value):
        return None
    tags = {collapse_pos(tag) for tag in value.split(sep)}
    tags.discard(None)
    if not tags:
        return None
    return tuple(sorted(tags))


def pos_features(row: Optional[Dict]) -> Dict:
    """Derive the POS columns from one POS-norms row (or None if absent)."""
    if row is None:
        return {
            'pos_dominant': None,
            'pos_all': None,
            'pos_dominance_fraction': None,
        }

    fraction = row.get('dominance')
    return {
        'pos_dominant': collapse_pos(row.get('dominant')),
        'pos_all': collapse_distribution(row.get('distribution')),
        'pos_dominance_fraction': None if is_missing(fraction) else float(fraction),
    }


def split_noun(pos: Optional[str], mass_count: Optional[str]) -> Optional[str]:
    """Replace 'Noun' by 'mass noun' / 'count noun' when countability is known."""
    if pos == NOUN and mass_count is not None:
        return f"{mass_count} noun"
    return pos

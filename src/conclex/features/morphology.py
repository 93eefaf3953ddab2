"""
Suffix extraction from morpheme segmentation strings.

Segmentations mark each derivational suffix with '>' (for example
"{(happy)}>ness>"). A word's suffix label comes from an ordered rule list:
every rule whose marker occurs in the segmentation matches, and the LAST
matching rule in declared order wins. So a parse containing both ">er" and
">ly" is labelled "-er" (declared after "-ly") regardless of where the
markers sit in the string.

has_suffix is only defined for words of at most two morphemes. For longer
words it is None with status 'not applicable', distinct from None with
status 'unknown' (no morpheme count or no segmentation).
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from conclex.features.pos import is_missing


@dataclass(frozen=True)
class SuffixRule:
    marker: str
    label: str


SUFFIX_RULES: Tuple[SuffixRule, ...] = (
    SuffixRule('>ly', '-ly'),
    SuffixRule('>y', '-y'),
    SuffixRule('>er', '-er'),
    SuffixRule('>ion', '-ion'),
    SuffixRule('>al', '-al'),
    SuffixRule('>ness', '-ness'),
    SuffixRule('>ic', '-ic'),
    SuffixRule('>ate', '-ate'),
    SuffixRule('>able', '-able'),
    SuffixRule('>est', '-est'),
    SuffixRule('>ious', '-ious'),
    SuffixRule('>ity', '-ity'),
    SuffixRule('>ive', '-ive'),
    SuffixRule('>ant', '-ant'),
    SuffixRule('>ist', '-ist'),
    SuffixRule('>ize', '-ize'),
    SuffixRule('>ise', '-ize'),
    SuffixRule('>less', '-less'),
    SuffixRule('>ory', '-ory'),
    SuffixRule('>ful', '-ful'),
    SuffixRule('>ance', '-ance'),
)

HAS_SUFFIX = 'has suffix'
NO_SUFFIX = 'no suffix'
MONOMORPHEMIC = 'monomorphemic'

STATUS_KNOWN = 'known'
STATUS_NOT_APPLICABLE = 'not applicable'
STATUS_UNKNOWN = 'unknown'

MAX_SUFFIX_MORPHEMES = 2


def match_suffix(parse, rules: Tuple[SuffixRule, ...] = SUFFIX_RULES) -> Optional[str]:
    """Return the label of the last rule whose marker occurs in parse."""
    if is_missing(parse):
        return None
    label = None
    for rule in rules:
        if rule.marker in parse:
            label = rule.label
    return label


def has_suffix_flag(morpheme_count: Optional[int], suffix_label: Optional[str],
                    parse: Optional[str]) -> Tuple[Optional[str], str]:
    """
    Decide has_suffix and its status.

    Returns:
        (has_suffix, status) where status is 'known', 'not applicable'
        (more than two morphemes) or 'unknown' (no count or no segmentation)
    """
    if morpheme_count is None:
        return None, STATUS_UNKNOWN
    if morpheme_count > MAX_SUFFIX_MORPHEMES:
        return None, STATUS_NOT_APPLICABLE
    if suffix_label is not None:
        return HAS_SUFFIX, STATUS_KNOWN
    if parse is not None:
        return NO_SUFFIX, STATUS_KNOWN
    return None, STATUS_UNKNOWN


def suffix_or_monomorphemic(morpheme_count: Optional[int], suffix_label: Optional[str]) -> Optional[str]:
    if morpheme_count == 1:
        return MONOMORPHEMIC
    return suffix_label


def morphology_features(parse, morpheme_count: Optional[int]) -> dict:
    """Derive all suffix columns for one word."""
    parse = None if is_missing(parse) else parse
    suffix_label = match_suffix(parse)
    has_suffix, status = has_suffix_flag(morpheme_count, suffix_label, parse)
    return {
        'morph_parse': parse,
        'suffix_label': suffix_label,
        'has_suffix': has_suffix,
        'has_suffix_status': status,
        'suffix_or_monomorphemic': suffix_or_monomorphemic(morpheme_count, suffix_label),
    }

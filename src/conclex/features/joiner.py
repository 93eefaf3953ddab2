#!/usr/bin/env python3
"""
joiner.py - Build the per-lemma working table.

Pipeline:
    concreteness norms -> lemmas -> POS -> lexicon counts -> etymology
    -> segmentation/suffixes -> countability -> compounds
    -> etymology frequency class (second pass over the joined table)

Joins are exact string lookups on the lemma. When an auxiliary table has
duplicate keys the first row wins. A missing key leaves the feature empty;
it is counted and logged, never raised.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from conclex.features.compounds import build_compound_set, is_compound
from conclex.features.countability import classify_countability
from conclex.features.etymology import (
    DEFAULT_LARGE_THRESHOLD,
    collapse_origin,
    frequency_classes,
    simplify_group,
)
from conclex.features.morphology import morphology_features
from conclex.features.pos import is_missing, pos_features, split_noun
from conclex.lemmas import Lemmatizer, normalize_lemmas
from conclex.records import WordRecord, records_to_frame
from conclex.resources import LexicalResources


logger = logging.getLogger(__name__)


def first_match_lookup(table: pd.DataFrame, key: str) -> Dict[str, Dict[str, Any]]:
    """
    Index a table by key, keeping only the first row per key.

    Returns:
        Dict mapping key -> row dict (without the key column)
    """
    rows = table.dropna(subset=[key]).drop_duplicates(subset=[key], keep='first')
    return rows.set_index(key).to_dict('index')


def as_count(value) -> Optional[int]:
    if is_missing(value):
        return None
    return int(value)


def as_text(value) -> Optional[str]:
    if is_missing(value):
        return None
    return str(value)


def segmentation(word: str, *lookups: Dict[str, Dict[str, Any]]) -> Optional[str]:
    """First non-empty segmentation for word, checking lookups in order."""
    for lookup in lookups:
        parse = as_text(lookup.get(word, {}).get('parse'))
        if parse is not None:
            return parse
    return None


def concreteness_entries(table: pd.DataFrame) -> List[Dict]:
    """Rated words as row dicts, in source order."""
    entries = []
    for row in table.dropna(subset=['word']).itertuples(index=False):
        entries.append({
            'word': row.word,
            'concreteness_mean': float(row.mean),
            'concreteness_sd': float(row.sd),
            'percent_known': float(row.percent_known),
        })
    return entries


def log_missing(records: List[WordRecord]):
    """Log how many lemmas lack each joined feature."""
    total = len(records)
    checks = [
        ('POS', lambda r: r.pos_dominant is None),
        ('morpheme count', lambda r: r.morpheme_count is None),
        ('segmentation', lambda r: r.morph_parse is None),
        ('etymology', lambda r: r.etymology_raw is None),
        ('etymology group', lambda r: r.etymology_group is None),
        ('mass/count class', lambda r: r.mass_count_class is None),
    ]
    logger.info("Missing features:")
    for label, check in checks:
        missing = sum(1 for record in records if check(record))
        logger.info(f"  {missing:,} of {total:,} words with unknown {label}")
    not_applicable = sum(1 for r in records if r.has_suffix_status == 'not applicable')
    logger.info(f"  {not_applicable:,} words with more than two morphemes (has_suffix not applicable)")


def build_word_records(
    resources: LexicalResources,
    lemmatize: Lemmatizer,
    config: Optional[Dict[str, Any]] = None,
) -> List[WordRecord]:
    """
    Join every resource onto the lemmatized concreteness norms.

    Args:
        resources: Loaded raw tables
        lemmatize: Lemmatizer callable (str -> str)
        config: Analysis config ('lemmas' and 'etymology' sections used)

    Returns:
        One WordRecord per distinct lemma, in concreteness-table order
    """
    config = config or {}
    exception_pattern = config.get('lemmas', {}).get('exception_pattern')
    large_threshold = config.get('etymology', {}).get('large_class_threshold', DEFAULT_LARGE_THRESHOLD)

    logger.info("Normalizing lemmas...")
    entries = normalize_lemmas(concreteness_entries(resources.concreteness), lemmatize, exception_pattern)

    logger.info("Building lookups...")
    pos_lookup = first_match_lookup(resources.pos, 'word')
    lexicon_lookup = first_match_lookup(resources.lexicon, 'word')
    etymology_lookup = first_match_lookup(resources.etymology, 'word')
    suffixed_lookup = first_match_lookup(resources.morph_suffixed, 'word')
    unsuffixed_lookup = first_match_lookup(resources.morph_unsuffixed, 'word')
    countability = classify_countability(resources.countability)
    compounds = build_compound_set(resources.compound_lists)
    logger.info(f"  POS: {len(pos_lookup):,}  lexicon: {len(lexicon_lookup):,}  "
                f"etymology: {len(etymology_lookup):,}  compounds: {len(compounds):,}")

    logger.info("Joining features...")
    records = []
    for entry in entries:
        word = entry['word']

        lexicon_row = lexicon_lookup.get(word, {})
        morpheme_count = as_count(lexicon_row.get('morphemes'))

        parse = segmentation(word, suffixed_lookup, unsuffixed_lookup)
        etymology_raw = as_text(etymology_lookup.get(word, {}).get('origin'))
        etymology_group = collapse_origin(etymology_raw)
        mass_count = countability.get(word)
        pos = pos_features(pos_lookup.get(word))

        records.append(WordRecord(
            word=word,
            surface=entry['surface'],
            concreteness_mean=entry['concreteness_mean'],
            concreteness_sd=entry['concreteness_sd'],
            percent_known=entry['percent_known'],
            letters=as_count(lexicon_row.get('letters')),
            phonemes=as_count(lexicon_row.get('phonemes')),
            morpheme_count=morpheme_count,
            etymology_raw=etymology_raw,
            etymology_group=etymology_group,
            etymology_simple=simplify_group(etymology_group),
            is_compound=is_compound(word, compounds),
            mass_count_class=mass_count,
            pos_with_noun_split=split_noun(pos['pos_dominant'], mass_count),
            **pos,
            **morphology_features(parse, morpheme_count),
        ))

    # Second pass: label counts are only known once every word is joined
    classes = frequency_classes((r.etymology_raw for r in records), large_threshold)
    records = [
        dataclasses.replace(r, etymology_frequency_class=classes.get(r.etymology_raw))
        for r in records
    ]

    log_missing(records)
    logger.info(f"  -> {len(records):,} word records")
    return records


def build_word_table(
    resources: LexicalResources,
    lemmatize: Lemmatizer,
    config: Optional[Dict[str, Any]] = None,
) -> pd.DataFrame:
    """Working table as a DataFrame (one row per lemma)."""
    return records_to_frame(build_word_records(resources, lemmatize, config))

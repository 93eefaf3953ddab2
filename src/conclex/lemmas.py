#!/usr/bin/env python3
"""
lemmas.py - Canonicalize rated words to lemmas.

Every word not matching the exception pattern (default: contains "est") is
replaced by its lemma: inflectional endings stripped, derivational morphology
kept. The pattern protects words such as "interest" or "forest" whose
spelling the lemmatizer would otherwise mangle.

After lemmatization, duplicate lemmas are removed keeping the first row in
input order. If "cats" and "cat" are both rated, only whichever comes first
survives; the other rating is dropped.

The lemmatizer is any callable str -> str. The default wraps NLTK's WordNet
lemmatizer.
"""

import logging
import re
from typing import Callable, Dict, List, Pattern, Union

import nltk
from nltk.corpus import wordnet as wn
from nltk.stem import WordNetLemmatizer


logger = logging.getLogger(__name__)


Lemmatizer = Callable[[str], str]

DEFAULT_EXCEPTION_PATTERN = 'est'

# Readings tried in order; the first one that changes the word wins
WORDNET_READINGS = ('n', 'v', 'a')


def ensure_wordnet_data():
    """Download WordNet data if not present."""
    try:
        wn.synsets('test')
        logger.info("WordNet data found")
    except LookupError:
        logger.info("Downloading WordNet data...")
        nltk.download('wordnet', quiet=True)
        nltk.download('omw-1.4', quiet=True)
        logger.info("WordNet data downloaded")


def make_wordnet_lemmatizer() -> Lemmatizer:
    """Build the default lemmatizer on top of NLTK WordNet."""
    ensure_wordnet_data()
    lemmatizer = WordNetLemmatizer()

    def lemmatize(word: str) -> str:
        for reading in WORDNET_READINGS:
            lemma = lemmatizer.lemmatize(word, pos=reading)
            if lemma != word:
                return lemma
        return word

    return lemmatize


def compile_exception(pattern: Union[str, Pattern, None]) -> Pattern:
    if pattern is None:
        pattern = DEFAULT_EXCEPTION_PATTERN
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def lemmatize_word(word: str, lemmatize: Lemmatizer, exception: Union[str, Pattern, None] = None) -> str:
    """Return the lemma of word, or word itself when it matches the exception."""
    if compile_exception(exception).search(word):
        return word
    return lemmatize(word)


def normalize_lemmas(
    entries: List[Dict],
    lemmatize: Lemmatizer,
    exception_pattern: Union[str, Pattern, None] = None,
) -> List[Dict]:
    """
    Replace each entry's 'word' by its lemma and drop duplicate lemmas.

    Args:
        entries: Row dicts with a 'word' key, in source order
        lemmatize: Lemmatizer callable
        exception_pattern: Regex; matching words are left as-is

    Returns:
        New list of new dicts. 'word' holds the lemma and 'surface' the
        original form. The first row per lemma wins.
    """
    exception = compile_exception(exception_pattern)

    normalized = []
    seen = set()
    collapsed = 0
    exempt = 0

    for entry in entries:
        surface = entry['word']
        if exception.search(surface):
            exempt += 1
        lemma = lemmatize_word(surface, lemmatize, exception)

        if lemma in seen:
            collapsed += 1
            logger.debug(f"Dropping '{surface}': lemma '{lemma}' already present")
            continue
        seen.add(lemma)

        row = dict(entry)
        row['surface'] = surface
        row['word'] = lemma
        normalized.append(row)

    logger.info(f"  Lemmatized {len(entries):,} words ({exempt:,} exempt by pattern '{exception.pattern}')")
    logger.info(f"  Dropped {collapsed:,} rows whose lemma was already present")
    logger.info(f"  -> {len(normalized):,} distinct lemmas")
    return normalized

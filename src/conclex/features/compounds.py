"""Compound membership across the compound word lists."""

from typing import FrozenSet, Iterable


def build_compound_set(word_lists: Iterable[Iterable[str]]) -> FrozenSet[str]:
    """Union of all lists. Words are kept exactly as the lists spell them."""
    compounds = set()
    for words in word_lists:
        compounds.update(words)
    return frozenset(compounds)


def is_compound(word: str, compounds: FrozenSet[str]) -> bool:
    return word in compounds

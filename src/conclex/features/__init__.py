"""
Feature derivation from auxiliary lexical resources.

This package attaches one group of columns per resource:
- pos: dominant POS, POS distribution, function-word collapsing
- etymology: origin label -> group, frequency class of the raw label
- morphology: suffix extraction from segmentation strings
- countability: mass/count class from the class incidence table
- compounds: membership in the compound word lists

The joiner module combines them into the per-lemma working table.
"""

from conclex.features.joiner import (
    build_word_records,
    build_word_table,
)

__all__ = [
    "build_word_records",
    "build_word_table",
]

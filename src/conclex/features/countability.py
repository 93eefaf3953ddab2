"""
Mass/count classification from a countability incidence table.

The table has one row per (lemma, class) attestation. A lemma is 'count'
when it is attested at least once as count and never in any of the other
tracked classes; 'mass' symmetrically. Anything else (mixed usage, only
flexible/neither attestations) gets no class. Lemmas absent from the table
also get no class, so "no data" and "mixed usage" look the same downstream.
"""

import logging
from typing import Dict

import pandas as pd


logger = logging.getLogger(__name__)


COUNT = 'count'
MASS = 'mass'
TRACKED_CLASSES = (COUNT, MASS, 'flexible', 'neither')


def incidence_table(table: pd.DataFrame) -> pd.DataFrame:
    """Lemma x tracked-class attestation counts (untracked classes ignored)."""
    rows = table.dropna(subset=['lemma', 'class'])
    counts = pd.crosstab(rows['lemma'], rows['class'])
    return counts.reindex(columns=list(TRACKED_CLASSES), fill_value=0)


def classify_countability(table: pd.DataFrame) -> Dict[str, str]:
    """
    Build the lemma -> 'mass'/'count' lookup.

    Args:
        table: Countability resource with 'lemma' and 'class' columns

    Returns:
        Dict containing only the lemmas with an exclusive class
    """
    counts = incidence_table(table)
    classes: Dict[str, str] = {}

    for label in (COUNT, MASS):
        others = [c for c in TRACKED_CLASSES if c != label]
        exclusive = (counts[label] >= 1) & (counts[others].sum(axis=1) == 0)
        for lemma in counts.index[exclusive]:
            classes[lemma] = label

    logger.info(f"  Countability: {len(counts):,} lemmas, "
                f"{sum(1 for c in classes.values() if c == COUNT):,} count-only, "
                f"{sum(1 for c in classes.values() if c == MASS):,} mass-only")
    return classes

#!/usr/bin/env python3
"""
filters.py - Data-quality and variability filters.

Two filters produce the analysis datasets:
  1. Quality: keep words known to more than min_percent_known of raters
  2. Low variability: of those, keep words whose rating SD is strictly
     below the median SD (ties at the median are excluded)

Every analysis runs on both datasets with identical logic. Returned tables
are copies; filtering never modifies its input.
"""

import logging
from dataclasses import dataclass
from typing import Dict

import pandas as pd


logger = logging.getLogger(__name__)


FULL = 'full'
LOW_VARIABILITY = 'low_variability'

DEFAULT_MIN_PERCENT_KNOWN = 0.95


@dataclass(frozen=True)
class QualityFilterResult:
    retained: pd.DataFrame
    excluded_count: int
    excluded_proportion: float


def apply_quality_filter(table: pd.DataFrame, min_percent_known: float = DEFAULT_MIN_PERCENT_KNOWN) -> QualityFilterResult:
    """
    Keep rows with percent_known strictly above the threshold.

    Rows with a missing percent_known are excluded.
    """
    keep = table['percent_known'] > min_percent_known
    retained = table.loc[keep].copy()
    excluded = len(table) - len(retained)
    proportion = excluded / len(table) if len(table) else 0.0

    logger.info(f"Quality filter (percent_known > {min_percent_known}):")
    logger.info(f"  Excluded {excluded:,} of {len(table):,} words ({proportion:.1%})")
    logger.info(f"  -> {len(retained):,} retained")
    return QualityFilterResult(retained, excluded, proportion)


def low_variability_subset(table: pd.DataFrame, column: str = 'concreteness_sd') -> pd.DataFrame:
    """Rows whose rating SD is strictly below the median SD."""
    median = table[column].median()
    subset = table.loc[table[column] < median].copy()
    logger.info(f"Low-variability subset ({column} < median {median:.3f}): {len(subset):,} of {len(table):,}")
    return subset


def split_datasets(filtered: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """
    Pair a quality-filtered table with its low-variability subset.

    Returns:
        {'full': filtered table, 'low_variability': subset}, in that order
    """
    return {
        FULL: filtered,
        LOW_VARIABILITY: low_variability_subset(filtered),
    }

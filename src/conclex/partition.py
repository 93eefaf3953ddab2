#!/usr/bin/env python3
"""
partition.py - Unique variance contribution per predictor.

For a full model with predictors P = [p1..pk], the unique contribution of pi
is R^2(full) - R^2(P without pi), both fitted on the same rows. Dropping the
only predictor leaves the intercept-only model, R^2 = 0.

Under collinearity a contribution can come out slightly negative; it is
reported as computed.
"""

import logging
from dataclasses import dataclass
from typing import List, Mapping, Sequence

import pandas as pd

from conclex.models import FitResult, fit_frame


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VarianceContribution:
    predictor: str
    full_r_squared: float
    reduced_r_squared: float
    unique: float


def unique_contributions(full: FitResult) -> List[VarianceContribution]:
    """
    Leave-one-predictor-out R^2 differences for a fitted model.

    Reduced models are refit on full.frame, the rows the full model used.

    Returns:
        One VarianceContribution per predictor, in declared order
    """
    contributions = []
    for predictor in full.predictors:
        reduced_predictors = [p for p in full.predictors if p != predictor]
        reduced = fit_frame(full.frame, full.outcome, reduced_predictors)
        contributions.append(VarianceContribution(
            predictor=predictor.name,
            full_r_squared=full.r_squared,
            reduced_r_squared=reduced.r_squared,
            unique=full.r_squared - reduced.r_squared,
        ))
        logger.debug(f"  {predictor.name}: R2 {full.r_squared:.4f} -> {reduced.r_squared:.4f}")
    return contributions


def contribution_table(contributions: Mapping[str, Sequence[VarianceContribution]]) -> pd.DataFrame:
    """
    Unique contributions of the same model on several datasets.

    Args:
        contributions: dataset name -> unique_contributions() of its full fit

    Returns:
        DataFrame indexed by predictor name (order of the first dataset), one
        column per dataset (mapping order)
    """
    if not contributions:
        return pd.DataFrame(index=pd.Index([], name='predictor'))

    first = next(iter(contributions.values()))
    index = pd.Index([c.predictor for c in first], name='predictor')
    columns = {
        name: pd.Series({c.predictor: c.unique for c in items}).reindex(index)
        for name, items in contributions.items()
    }
    return pd.DataFrame(columns, index=index)

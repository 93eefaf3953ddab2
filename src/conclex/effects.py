#!/usr/bin/env python3
"""
effects.py - Per-factor effect summaries.

Each helper takes a table, a factor column and the outcome column, drops
rows missing either, and returns a result object carrying the per-level
summaries a renderer needs plus the test statistics:

  - compare_two_groups: equal-variance t-test and Cohen's d (binary factor)
  - categorical_effect: one-way ANOVA plus the linear model R^2
  - numeric_effect: simple linear regression and its R^2
  - association_test: chi-square test of independence of two factors
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats as sp_stats

from conclex.errors import AnalysisError, DegenerateModelError
from conclex.models import FitResult, Predictor, fit_linear_model


@dataclass(frozen=True)
class GroupSummary:
    level: str
    mean: float
    sd: float
    n: int


@dataclass
class TwoGroupComparison:
    factor: str
    groups: List[GroupSummary]
    t_statistic: float
    p_value: float
    df: int
    cohens_d: float

    test = 't-test'

    @property
    def statistic(self) -> float:
        return self.t_statistic

    @property
    def effect(self) -> float:
        return self.cohens_d

    def to_dict(self) -> Dict[str, Any]:
        return {
            'test': self.test,
            'factor': self.factor,
            'groups': [g.__dict__ for g in self.groups],
            't_statistic': self.t_statistic,
            'p_value': self.p_value,
            'df': self.df,
            'cohens_d': self.cohens_d,
        }


@dataclass
class CategoricalEffect:
    factor: str
    groups: List[GroupSummary]
    f_statistic: float
    p_value: float
    fit: FitResult = field(repr=False)

    test = 'one-way ANOVA'

    @property
    def statistic(self) -> float:
        return self.f_statistic

    @property
    def effect(self) -> float:
        return self.fit.r_squared

    def to_dict(self) -> Dict[str, Any]:
        return {
            'test': self.test,
            'factor': self.factor,
            'groups': [g.__dict__ for g in self.groups],
            'f_statistic': self.f_statistic,
            'p_value': self.p_value,
            'r_squared': self.fit.r_squared,
            'model': self.fit.to_dict(),
        }


@dataclass
class NumericEffect:
    predictor: str
    slope: float
    p_value: float
    fit: FitResult = field(repr=False)
    groups: List[GroupSummary] = field(default_factory=list)

    test = 'linear regression'

    @property
    def statistic(self) -> float:
        return self.slope

    @property
    def effect(self) -> float:
        return self.fit.r_squared

    def to_dict(self) -> Dict[str, Any]:
        return {
            'test': self.test,
            'predictor': self.predictor,
            'groups': [g.__dict__ for g in self.groups],
            'slope': self.slope,
            'p_value': self.p_value,
            'r_squared': self.fit.r_squared,
            'model': self.fit.to_dict(),
        }


@dataclass
class Association:
    row_factor: str
    column_factor: str
    chi2: float
    p_value: float
    dof: int
    cramers_v: float
    table: pd.DataFrame = field(repr=False)
    groups: List[GroupSummary] = field(default_factory=list)

    test = 'chi-square'

    @property
    def statistic(self) -> float:
        return self.chi2

    @property
    def effect(self) -> float:
        return self.cramers_v

    def to_dict(self) -> Dict[str, Any]:
        return {
            'test': self.test,
            'row_factor': self.row_factor,
            'column_factor': self.column_factor,
            'chi2': self.chi2,
            'p_value': self.p_value,
            'dof': self.dof,
            'cramers_v': self.cramers_v,
            'table': {
                str(row): {str(col): int(count) for col, count in counts.items()}
                for row, counts in self.table.iterrows()
            },
        }


def complete_rows(data: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    unknown = [c for c in columns if c not in data.columns]
    if unknown:
        raise AnalysisError(f"Unknown column(s): {', '.join(unknown)}")
    return data[list(columns)].dropna()


def level_label(level) -> str:
    # Morpheme counts arrive as floats (1.0); show them as 1
    if isinstance(level, float) and level.is_integer():
        return str(int(level))
    return str(level)


def summarize_groups(data: pd.DataFrame, factor: str, outcome: str) -> List[GroupSummary]:
    """Mean, SD and count of outcome per factor level, levels sorted."""
    rows = complete_rows(data, [factor, outcome])
    grouped = rows.groupby(factor, sort=True)[outcome].agg(['mean', 'std', 'count'])
    return [
        GroupSummary(
            level=level_label(level),
            mean=float(row['mean']),
            sd=float(row['std']) if not pd.isna(row['std']) else float('nan'),
            n=int(row['count']),
        )
        for level, row in grouped.iterrows()
    ]


def cohens_d(a: np.ndarray, b: np.ndarray) -> float:
    """Standardized mean difference (a - b) over the pooled SD."""
    n_a, n_b = len(a), len(b)
    pooled_var = ((n_a - 1) * np.var(a, ddof=1) + (n_b - 1) * np.var(b, ddof=1)) / (n_a + n_b - 2)
    if pooled_var <= 0:
        return float('nan')
    return float((np.mean(a) - np.mean(b)) / math.sqrt(pooled_var))


def compare_two_groups(data: pd.DataFrame, factor: str, outcome: str) -> TwoGroupComparison:
    """
    Equal-variance two-sample t-test between the two levels of factor.

    The difference and d are first level minus second level, levels sorted.
    """
    rows = complete_rows(data, [factor, outcome])
    levels = sorted(rows[factor].unique(), key=str)
    if len(levels) != 2:
        raise DegenerateModelError(f"'{factor}' has {len(levels)} level(s); a two-group comparison needs 2")

    a = rows.loc[rows[factor] == levels[0], outcome].to_numpy(dtype=float)
    b = rows.loc[rows[factor] == levels[1], outcome].to_numpy(dtype=float)
    if len(a) < 2 or len(b) < 2:
        raise DegenerateModelError(f"'{factor}' needs at least two observations per level")

    result = sp_stats.ttest_ind(a, b, equal_var=True)
    return TwoGroupComparison(
        factor=factor,
        groups=summarize_groups(rows, factor, outcome),
        t_statistic=float(result.statistic),
        p_value=float(result.pvalue),
        df=len(a) + len(b) - 2,
        cohens_d=cohens_d(a, b),
    )


def categorical_effect(data: pd.DataFrame, factor: str, outcome: str) -> CategoricalEffect:
    """One-way ANOVA across the levels of factor, plus outcome ~ factor R^2."""
    rows = complete_rows(data, [factor, outcome])
    samples = [group[outcome].to_numpy(dtype=float) for _, group in rows.groupby(factor, sort=True)]
    if len(samples) < 2:
        raise DegenerateModelError(f"'{factor}' has fewer than two levels")

    try:
        f_statistic, p_value = sp_stats.f_oneway(*samples)
    except ValueError as e:
        raise AnalysisError(f"One-way ANOVA on '{factor}' failed: {e}") from e
    fit = fit_linear_model(rows, outcome, [Predictor.categorical(factor)])
    return CategoricalEffect(
        factor=factor,
        groups=summarize_groups(rows, factor, outcome),
        f_statistic=float(f_statistic),
        p_value=float(p_value),
        fit=fit,
    )


def numeric_effect(data: pd.DataFrame, predictor: str, outcome: str) -> NumericEffect:
    """Simple regression outcome ~ predictor; groups summarize each observed value."""
    fit = fit_linear_model(data, outcome, [Predictor.numeric(predictor)])
    slope = next(c for c in fit.coefficients if c.term == predictor)
    return NumericEffect(
        predictor=predictor,
        slope=slope.estimate,
        p_value=slope.p_value,
        fit=fit,
        groups=summarize_groups(fit.frame, predictor, outcome),
    )


def association_test(data: pd.DataFrame, row_factor: str, column_factor: str) -> Association:
    """Chi-square test of independence on the row x column contingency table."""
    rows = complete_rows(data, [row_factor, column_factor])
    table = pd.crosstab(rows[row_factor], rows[column_factor])
    if table.shape[0] < 2 or table.shape[1] < 2:
        raise DegenerateModelError(
            f"Contingency table {row_factor} x {column_factor} is {table.shape[0]}x{table.shape[1]}"
        )

    try:
        chi2, p_value, dof, _ = sp_stats.chi2_contingency(table)
    except ValueError as e:
        raise AnalysisError(f"Chi-square on {row_factor} x {column_factor} failed: {e}") from e
    n = int(table.to_numpy().sum())
    cramers_v = math.sqrt(chi2 / (n * (min(table.shape) - 1)))
    return Association(
        row_factor=row_factor,
        column_factor=column_factor,
        chi2=float(chi2),
        p_value=float(p_value),
        dof=int(dof),
        cramers_v=cramers_v,
        table=table,
    )

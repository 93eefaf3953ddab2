#!/usr/bin/env python3
"""
analysis.py - Run every factor analysis on every dataset.

Analyses are declared as data (FactorAnalysis): which column, which test,
which rows. run_analyses() applies each one to each dataset ('full' and
'low_variability'). A failure in one analysis (AnalysisError, e.g. a factor
left with a single level after restriction) is logged and recorded, and the
run moves on to the next analysis.

The combined model fits

    concreteness_mean ~ pos_with_noun_split + morpheme_count + etymology_simple

per dataset, reporting R^2, per-term ANOVA, VIFs and the unique variance
contribution of each predictor.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from conclex.effects import (
    association_test,
    categorical_effect,
    compare_two_groups,
    numeric_effect,
)
from conclex.errors import AnalysisError
from conclex.models import (
    DEFAULT_VIF_THRESHOLD,
    FitResult,
    Predictor,
    VifEntry,
    fit_count_model,
    fit_linear_model,
    variance_inflation,
)
from conclex.partition import VarianceContribution, contribution_table, unique_contributions


logger = logging.getLogger(__name__)


OUTCOME = 'concreteness_mean'

BINARY = 'binary'
CATEGORICAL = 'categorical'
NUMERIC = 'numeric'
ASSOCIATION = 'association'
COUNT_MODEL = 'count_model'

Restriction = Callable[[pd.DataFrame], pd.DataFrame]


@dataclass(frozen=True)
class FactorAnalysis:
    """One declared analysis: a factor, a test kind, and a row restriction."""
    name: str
    kind: str
    column: str
    description: str
    restrict: Optional[Restriction] = None
    # Second factor for associations, predictor for count models
    other: Optional[str] = None

    def rows(self, data: pd.DataFrame) -> pd.DataFrame:
        if self.restrict is None:
            return data
        return self.restrict(data)


@dataclass
class AnalysisOutcome:
    analysis: str
    dataset: str
    n_rows: int
    result: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# Row restrictions
# =============================================================================

def nouns_with_countability(data: pd.DataFrame) -> pd.DataFrame:
    return data[(data['pos_dominant'] == 'Noun') & data['mass_count_class'].notna()]


def non_compounds(data: pd.DataFrame) -> pd.DataFrame:
    return data[~data['is_compound']]


def up_to_two_morphemes(data: pd.DataFrame) -> pd.DataFrame:
    return data[data['morpheme_count'] <= 2]


def frequent_etymologies(data: pd.DataFrame) -> pd.DataFrame:
    return data[data['etymology_frequency_class'] == 'large']


ANALYSES: Tuple[FactorAnalysis, ...] = (
    FactorAnalysis(
        'pos', CATEGORICAL, 'pos_dominant',
        "Dominant part of speech",
    ),
    FactorAnalysis(
        'pos_noun_split', CATEGORICAL, 'pos_with_noun_split',
        "Part of speech with nouns split into mass and count",
    ),
    FactorAnalysis(
        'mass_count', BINARY, 'mass_count_class',
        "Mass vs count nouns",
        restrict=nouns_with_countability,
    ),
    FactorAnalysis(
        'compound', BINARY, 'is_compound',
        "Compounds vs non-compounds",
    ),
    FactorAnalysis(
        'morpheme_count', NUMERIC, 'morpheme_count',
        "Number of morphemes (non-compounds)",
        restrict=non_compounds,
    ),
    FactorAnalysis(
        'letters', NUMERIC, 'letters',
        "Word length in letters",
    ),
    FactorAnalysis(
        'has_suffix', BINARY, 'has_suffix',
        "Suffixed vs unsuffixed words of at most two morphemes",
        restrict=up_to_two_morphemes,
    ),
    FactorAnalysis(
        'suffix_type', CATEGORICAL, 'suffix_or_monomorphemic',
        "Suffix type vs monomorphemic words",
        restrict=up_to_two_morphemes,
    ),
    FactorAnalysis(
        'etymology_simple', BINARY, 'etymology_simple',
        "French vs other origin",
    ),
    FactorAnalysis(
        'etymology_group', CATEGORICAL, 'etymology_group',
        "Etymology group (French, Latin, Other)",
    ),
    FactorAnalysis(
        'etymology_frequent', CATEGORICAL, 'etymology_raw',
        "Raw origin labels with more than the threshold number of words",
        restrict=frequent_etymologies,
    ),
    FactorAnalysis(
        'etymology_x_suffix', ASSOCIATION, 'etymology_simple',
        "Association of etymology and suffixation",
        restrict=up_to_two_morphemes,
        other='has_suffix',
    ),
    FactorAnalysis(
        'etymology_x_countability', ASSOCIATION, 'etymology_simple',
        "Association of etymology and mass/count status",
        restrict=nouns_with_countability,
        other='mass_count_class',
    ),
    FactorAnalysis(
        'morphemes_by_etymology', COUNT_MODEL, 'morpheme_count',
        "Morpheme count by etymology (Poisson, log link)",
        other='etymology_simple',
    ),
)

COMBINED_PREDICTORS: Tuple[Predictor, ...] = (
    Predictor.categorical('pos_with_noun_split'),
    Predictor.numeric('morpheme_count'),
    Predictor.categorical('etymology_simple'),
)


def run_analysis(analysis: FactorAnalysis, data: pd.DataFrame, outcome: str = OUTCOME):
    """Run one declared analysis on already restricted rows."""
    if analysis.kind == BINARY:
        return compare_two_groups(data, analysis.column, outcome)
    if analysis.kind == CATEGORICAL:
        return categorical_effect(data, analysis.column, outcome)
    if analysis.kind == NUMERIC:
        return numeric_effect(data, analysis.column, outcome)
    if analysis.kind == ASSOCIATION:
        return association_test(data, analysis.column, analysis.other)
    if analysis.kind == COUNT_MODEL:
        return fit_count_model(data, analysis.column, [Predictor.categorical(analysis.other)])
    raise AnalysisError(f"Unknown analysis kind '{analysis.kind}'")


def run_analyses(
    datasets: Mapping[str, pd.DataFrame],
    analyses: Sequence[FactorAnalysis] = ANALYSES,
    outcome: str = OUTCOME,
) -> List[AnalysisOutcome]:
    """
    Run each analysis on each dataset.

    Returns:
        Outcomes in analysis order, datasets in mapping order within each
    """
    outcomes = []
    for analysis in analyses:
        logger.info(f"Analysis: {analysis.description}")
        for dataset, data in datasets.items():
            rows = analysis.rows(data)
            try:
                result = run_analysis(analysis, rows, outcome)
            except AnalysisError as e:
                logger.warning(f"  [{dataset}] {analysis.name} failed: {e}")
                outcomes.append(AnalysisOutcome(analysis.name, dataset, len(rows), error=str(e)))
                continue

            p_value = getattr(result, 'p_value', None)
            if p_value is not None:
                logger.info(f"  [{dataset}] n={len(rows):,} p={p_value:.4g}")
            else:
                logger.info(f"  [{dataset}] n={len(rows):,}")
            outcomes.append(AnalysisOutcome(analysis.name, dataset, len(rows), result=result))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info(f"  -> {len(outcomes) - failed:,} analyses completed, {failed:,} failed")
    return outcomes


@dataclass
class CombinedModel:
    dataset: str
    fit: FitResult
    vif: List[VifEntry]
    contributions: List[VarianceContribution]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dataset': self.dataset,
            'model': self.fit.to_dict(),
            'term_p_values': self.fit.term_p_values(),
            'vif': [v.__dict__ for v in self.vif],
            'contributions': [c.__dict__ for c in self.contributions],
        }


@dataclass
class CombinedOutcome:
    dataset: str
    model: Optional[CombinedModel] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_combined_model(
    datasets: Mapping[str, pd.DataFrame],
    predictors: Sequence[Predictor] = COMBINED_PREDICTORS,
    outcome: str = OUTCOME,
    vif_threshold: float = DEFAULT_VIF_THRESHOLD,
) -> List[CombinedOutcome]:
    """Fit the combined model, VIFs and variance partition per dataset."""
    logger.info("Combined model: " + " + ".join(p.name for p in predictors))
    outcomes = []
    for dataset, data in datasets.items():
        try:
            fit = fit_linear_model(data, outcome, predictors)
            model = CombinedModel(
                dataset=dataset,
                fit=fit,
                vif=variance_inflation(fit, vif_threshold),
                contributions=unique_contributions(fit),
            )
        except AnalysisError as e:
            logger.warning(f"  [{dataset}] combined model failed: {e}")
            outcomes.append(CombinedOutcome(dataset, error=str(e)))
            continue

        logger.info(f"  [{dataset}] n={fit.n_obs:,} R2={fit.r_squared:.4f}")
        for c in model.contributions:
            logger.info(f"    unique R2 {c.predictor}: {c.unique:.4f}")
        outcomes.append(CombinedOutcome(dataset, model=model))
    return outcomes


def partition_table(outcomes: Sequence[CombinedOutcome]) -> pd.DataFrame:
    """Unique contributions as predictors x datasets (successful fits only)."""
    return contribution_table({o.dataset: o.model.contributions for o in outcomes if o.ok})

#!/usr/bin/env python3
"""
models.py - Linear and count models over the working table.

Models are specified by an outcome column and a list of typed predictors:

    fit = fit_linear_model(table, 'concreteness_mean', [
        Predictor.categorical('pos_with_noun_split'),
        Predictor.numeric('morpheme_count'),
        Predictor.categorical('etymology_simple'),
    ])
    fit.r_squared, fit.anova, variance_inflation(fit)

Rows with a missing value in any model column are dropped before fitting,
so every model over the same columns sees the same rows. Degenerate input
(no rows, a predictor with a single level, a constant outcome) raises
DegenerateModelError.

An empty predictor list fits the intercept-only model, whose R^2 is 0.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf

from conclex.errors import AnalysisError, DegenerateModelError


logger = logging.getLogger(__name__)


CATEGORICAL = 'categorical'
NUMERIC = 'numeric'

INTERCEPT = 'Intercept'
DEFAULT_VIF_THRESHOLD = 5.0


@dataclass(frozen=True)
class Predictor:
    """A model term: a table column plus how to encode it."""
    name: str
    kind: str = NUMERIC

    def __post_init__(self):
        if self.kind not in (CATEGORICAL, NUMERIC):
            raise ValueError(f"Unknown predictor kind '{self.kind}' for '{self.name}'")
        if not self.name.isidentifier():
            raise ValueError(f"Predictor name must be a plain column identifier: '{self.name}'")

    @classmethod
    def categorical(cls, name: str) -> 'Predictor':
        return cls(name, CATEGORICAL)

    @classmethod
    def numeric(cls, name: str) -> 'Predictor':
        return cls(name, NUMERIC)

    @property
    def term(self) -> str:
        """Term label as it appears in design matrices and ANOVA tables."""
        if self.kind == CATEGORICAL:
            return f"C({self.name})"
        return self.name

    def owns_column(self, column: str) -> bool:
        """True if a design-matrix column belongs to this predictor."""
        if self.kind == CATEGORICAL:
            return column.startswith(f"{self.term}[")
        return column == self.name


@dataclass(frozen=True)
class Coefficient:
    term: str
    estimate: float
    std_error: float
    statistic: float
    p_value: float


@dataclass
class FitResult:
    """Fitted ordinary least squares model."""
    outcome: str
    predictors: Tuple[Predictor, ...]
    n_obs: int
    r_squared: float
    adj_r_squared: float
    coefficients: List[Coefficient]
    anova: Optional[pd.DataFrame] = field(default=None, repr=False)
    frame: Optional[pd.DataFrame] = field(default=None, repr=False)
    model: Any = field(default=None, repr=False)

    def term_p_values(self) -> Dict[str, float]:
        """Per-predictor ANOVA p-value, keyed by predictor name."""
        if self.anova is None:
            return {}
        return {
            p.name: float(self.anova.loc[p.term, 'PR(>F)'])
            for p in self.predictors
            if p.term in self.anova.index
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'outcome': self.outcome,
            'predictors': [{'name': p.name, 'kind': p.kind} for p in self.predictors],
            'n_obs': self.n_obs,
            'r_squared': self.r_squared,
            'adj_r_squared': self.adj_r_squared,
            'coefficients': [c.__dict__ for c in self.coefficients],
            'anova': frame_to_records(self.anova),
        }


@dataclass
class CountModelResult:
    """Fitted Poisson (log link) model."""
    outcome: str
    predictors: Tuple[Predictor, ...]
    n_obs: int
    coefficients: List[Coefficient]
    deviance: float
    null_deviance: float
    aic: float
    model: Any = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'outcome': self.outcome,
            'predictors': [{'name': p.name, 'kind': p.kind} for p in self.predictors],
            'n_obs': self.n_obs,
            'coefficients': [c.__dict__ for c in self.coefficients],
            'deviance': self.deviance,
            'null_deviance': self.null_deviance,
            'aic': self.aic,
        }


@dataclass(frozen=True)
class VifEntry:
    """Generalized variance inflation for one predictor."""
    predictor: str
    gvif: float
    df: int
    adjusted: float  # GVIF^(1/(2*df)), comparable across predictors
    flagged: bool


def frame_to_records(frame: Optional[pd.DataFrame]) -> Optional[Dict[str, Dict[str, Optional[float]]]]:
    if frame is None:
        return None
    return {
        str(index): {
            str(column): (None if pd.isna(value) else float(value))
            for column, value in row.items()
        }
        for index, row in frame.iterrows()
    }


def build_formula(outcome: str, predictors: Sequence[Predictor]) -> str:
    terms = [p.term for p in predictors] or ['1']
    return f"{outcome} ~ {' + '.join(terms)}"


def model_frame(data: pd.DataFrame, outcome: str, predictors: Sequence[Predictor]) -> pd.DataFrame:
    """
    Complete-case rows of the model columns, validated for fitting.

    Raises:
        AnalysisError: unknown column, duplicate predictor, non-numeric numeric predictor
        DegenerateModelError: no rows, constant outcome, single-level predictor
    """
    names = [p.name for p in predictors]
    if len(set(names)) != len(names):
        raise AnalysisError(f"Duplicate predictors: {names}")

    columns = [outcome] + names
    unknown = [c for c in columns if c not in data.columns]
    if unknown:
        raise AnalysisError(f"Unknown column(s): {', '.join(unknown)}")

    frame = data[columns].dropna()
    if frame.empty:
        raise DegenerateModelError(f"No complete rows for {build_formula(outcome, predictors)}")
    if frame[outcome].nunique() < 2:
        raise DegenerateModelError(f"Outcome '{outcome}' is constant")

    for predictor in predictors:
        values = frame[predictor.name]
        if predictor.kind == NUMERIC and not pd.api.types.is_numeric_dtype(values):
            raise AnalysisError(f"Numeric predictor '{predictor.name}' has non-numeric values")
        if values.nunique() < 2:
            raise DegenerateModelError(f"Predictor '{predictor.name}' has fewer than two distinct values")

    # Saturated fits leave no residual degrees of freedom
    parameters = 1 + sum(
        frame[p.name].nunique() - 1 if p.kind == CATEGORICAL else 1
        for p in predictors
    )
    if len(frame) <= parameters:
        raise DegenerateModelError(
            f"{len(frame)} complete row(s) for {parameters} parameters in {build_formula(outcome, predictors)}"
        )

    return frame


def extract_coefficients(fit) -> List[Coefficient]:
    return [
        Coefficient(
            term=str(term),
            estimate=float(fit.params[term]),
            std_error=float(fit.bse[term]),
            statistic=float(fit.tvalues[term]),
            p_value=float(fit.pvalues[term]),
        )
        for term in fit.params.index
    ]


def fit_frame(frame: pd.DataFrame, outcome: str, predictors: Sequence[Predictor]) -> FitResult:
    """Fit OLS on an already validated complete-case frame."""
    predictors = tuple(predictors)
    formula = build_formula(outcome, predictors)
    try:
        fit = smf.ols(formula, data=frame).fit()
        anova = sm.stats.anova_lm(fit, typ=2) if predictors else None
    except (ValueError, np.linalg.LinAlgError) as e:
        raise AnalysisError(f"Could not fit {formula}: {e}") from e

    if predictors:
        r_squared = float(fit.rsquared)
        adj_r_squared = float(fit.rsquared_adj)
    else:
        r_squared = 0.0
        adj_r_squared = 0.0

    return FitResult(
        outcome=outcome,
        predictors=predictors,
        n_obs=int(fit.nobs),
        r_squared=r_squared,
        adj_r_squared=adj_r_squared,
        coefficients=extract_coefficients(fit),
        anova=anova,
        frame=frame,
        model=fit,
    )


def fit_linear_model(data: pd.DataFrame, outcome: str, predictors: Sequence[Predictor]) -> FitResult:
    """
    Fit outcome ~ predictors by ordinary least squares.

    Args:
        data: Working table (or a subset of it)
        outcome: Numeric outcome column
        predictors: Typed predictors, in declared order

    Returns:
        FitResult with R^2, coefficients and a type II ANOVA table
    """
    frame = model_frame(data, outcome, predictors)
    result = fit_frame(frame, outcome, predictors)
    logger.debug(f"{build_formula(outcome, predictors)}: n={result.n_obs}, R2={result.r_squared:.4f}")
    return result


def fit_count_model(data: pd.DataFrame, outcome: str, predictors: Sequence[Predictor]) -> CountModelResult:
    """Fit a Poisson GLM (log link) for a non-negative count outcome."""
    predictors = tuple(predictors)
    frame = model_frame(data, outcome, predictors)
    if (frame[outcome] < 0).any():
        raise AnalysisError(f"Count outcome '{outcome}' has negative values")

    formula = build_formula(outcome, predictors)
    try:
        fit = smf.glm(formula, data=frame, family=sm.families.Poisson()).fit()
    except (ValueError, np.linalg.LinAlgError) as e:
        raise AnalysisError(f"Could not fit {formula}: {e}") from e

    return CountModelResult(
        outcome=outcome,
        predictors=predictors,
        n_obs=int(fit.nobs),
        coefficients=extract_coefficients(fit),
        deviance=float(fit.deviance),
        null_deviance=float(fit.null_deviance),
        aic=float(fit.aic),
        model=fit,
    )


def variance_inflation(fit: FitResult, threshold: float = DEFAULT_VIF_THRESHOLD) -> List[VifEntry]:
    """
    Generalized variance-inflation factors (Fox & Monette) per predictor.

    For a predictor spanning df design columns, GVIF = det(R11) det(R22) / det(R)
    over the correlation matrix R of the non-intercept columns. A predictor is
    flagged when GVIF^(1/df) exceeds threshold; the flag is informational.
    """
    exog_names = list(fit.model.model.exog_names)
    exog = pd.DataFrame(fit.model.model.exog, columns=exog_names)
    if INTERCEPT in exog.columns:
        exog = exog.drop(columns=INTERCEPT)

    columns = list(exog.columns)
    owned = {
        p.name: [i for i, c in enumerate(columns) if p.owns_column(c)]
        for p in fit.predictors
    }

    if len(fit.predictors) < 2:
        return [VifEntry(p.name, 1.0, len(owned[p.name]), 1.0, False) for p in fit.predictors]

    corr = np.atleast_2d(np.corrcoef(exog.values, rowvar=False))
    det_all = np.linalg.det(corr)

    entries = []
    for predictor in fit.predictors:
        idx = owned[predictor.name]
        rest = [i for i in range(len(columns)) if i not in idx]
        df = len(idx)
        with np.errstate(divide='ignore', invalid='ignore'):
            gvif = (np.linalg.det(corr[np.ix_(idx, idx)])
                    * np.linalg.det(corr[np.ix_(rest, rest)])
                    / det_all)
        gvif = float(gvif) if np.isfinite(gvif) and det_all > 0 else float('inf')
        adjusted = gvif ** (1.0 / (2 * df))
        entries.append(VifEntry(
            predictor=predictor.name,
            gvif=gvif,
            df=df,
            adjusted=adjusted,
            flagged=adjusted ** 2 > threshold,
        ))

    for entry in entries:
        if entry.flagged:
            logger.warning(f"  High variance inflation for '{entry.predictor}': GVIF={entry.gvif:.2f} (df={entry.df})")
    return entries

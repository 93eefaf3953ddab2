"""Tests for running declared analyses and the combined model."""
import pandas as pd
import pytest

from conclex.analysis import (
    ANALYSES,
    BINARY,
    COMBINED_PREDICTORS,
    FactorAnalysis,
    partition_table,
    run_analyses,
    run_combined_model,
    up_to_two_morphemes,
)
from conclex.effects import CategoricalEffect, TwoGroupComparison
from conclex.models import CountModelResult


@pytest.fixture
def datasets(analysis_table):
    low = analysis_table[analysis_table["concreteness_sd"] < analysis_table["concreteness_sd"].median()]
    return {"full": analysis_table, "low_variability": low}


def test_every_analysis_on_every_dataset(datasets):
    outcomes = run_analyses(datasets)

    assert len(outcomes) == len(ANALYSES) * 2
    assert [o.dataset for o in outcomes[:2]] == ["full", "low_variability"]
    assert [o.analysis for o in outcomes[::2]] == [a.name for a in ANALYSES]


def test_result_types(datasets):
    outcomes = {(o.analysis, o.dataset): o for o in run_analyses(datasets)}

    assert isinstance(outcomes[("pos", "full")].result, CategoricalEffect)
    assert isinstance(outcomes[("compound", "full")].result, TwoGroupComparison)
    assert isinstance(outcomes[("morphemes_by_etymology", "full")].result, CountModelResult)
    assert outcomes[("mass_count", "full")].ok


def test_failure_is_recorded_and_run_continues(datasets):
    broken = FactorAnalysis("french_only", BINARY, "etymology_simple", "Single level",
                            restrict=lambda d: d[d["etymology_simple"] == "French"])
    analyses = (broken, ANALYSES[0])

    outcomes = run_analyses(datasets, analyses)

    assert [o.ok for o in outcomes] == [False, False, True, True]
    assert "level" in outcomes[0].error
    assert outcomes[0].result is None


def test_morpheme_restriction_keeps_compounds(analysis_table):
    rows = up_to_two_morphemes(analysis_table)

    assert (rows["morpheme_count"] <= 2).all()
    assert len(rows) == (analysis_table["morpheme_count"] <= 2).sum()
    assert rows["is_compound"].any()


def test_combined_model(datasets):
    combined = run_combined_model(datasets)

    assert [c.dataset for c in combined] == ["full", "low_variability"]
    model = combined[0].model
    assert [v.predictor for v in model.vif] == [p.name for p in COMBINED_PREDICTORS]
    assert len(model.contributions) == 3
    assert set(model.to_dict()["term_p_values"]) == {p.name for p in COMBINED_PREDICTORS}


def test_combined_model_failure_recorded(datasets):
    empty = {"full": datasets["full"].iloc[0:0]}
    [outcome] = run_combined_model(empty)
    assert not outcome.ok
    assert outcome.model is None


def test_partition_table(datasets):
    partition = partition_table(run_combined_model(datasets))

    assert list(partition.index) == [p.name for p in COMBINED_PREDICTORS]
    assert list(partition.columns) == ["full", "low_variability"]
    assert (partition.loc["pos_with_noun_split"] > 0).all()


def test_partition_table_without_fits():
    partition = partition_table([])
    assert partition.empty
    assert isinstance(partition, pd.DataFrame)


def test_saturated_fit_recorded_and_run_continues(analysis_table):
    # One row per level leaves no residual degrees of freedom
    saturated = pd.DataFrame({
        "concreteness_mean": [4.5, 2.0, 3.1],
        "pos_dominant": ["Noun", "Verb", "Adjective"],
    })
    pos = next(a for a in ANALYSES if a.name == "pos")

    outcomes = run_analyses({"tiny": saturated, "full": analysis_table}, [pos])

    assert [o.ok for o in outcomes] == [False, True]
    assert "parameters" in outcomes[0].error


def test_saturated_combined_model_recorded(analysis_table):
    tiny = analysis_table.iloc[:4]
    outcomes = run_combined_model({"tiny": tiny, "full": analysis_table})

    assert [o.ok for o in outcomes] == [False, True]

"""Tests for part-of-speech collapsing."""
import math

from conclex.features.pos import (
    EXCLUDED_TAGS,
    FUNCTION_TAGS,
    collapse_distribution,
    collapse_pos,
    pos_features,
    split_noun,
)


def test_function_tags_collapse():
    for tag in FUNCTION_TAGS:
        assert collapse_pos(tag) == "Function"
    assert collapse_pos("Determiner") == "Function"


def test_excluded_tags_become_none():
    for tag in EXCLUDED_TAGS:
        assert collapse_pos(tag) is None


def test_lexical_tags_pass_through():
    for tag in ["Noun", "Verb", "Adjective", "Adverb"]:
        assert collapse_pos(tag) == tag


def test_missing_tags():
    assert collapse_pos(None) is None
    assert collapse_pos(float("nan")) is None
    assert collapse_pos("  ") is None


def test_distribution_collapsed_and_sorted():
    assert collapse_distribution("Noun.Verb.Determiner.Name") == ("Function", "Noun", "Verb")
    assert collapse_distribution("Article.Pronoun") == ("Function",)


def test_distribution_with_only_excluded_tags():
    assert collapse_distribution("Name.Number") is None
    assert collapse_distribution(None) is None


def test_pos_features_absent_row():
    assert pos_features(None) == {
        "pos_dominant": None,
        "pos_all": None,
        "pos_dominance_fraction": None,
    }


def test_pos_features_row():
    features = pos_features({"dominant": "Preposition", "dominance": 0.7, "distribution": "Preposition.Adverb"})
    assert features["pos_dominant"] == "Function"
    assert features["pos_all"] == ("Adverb", "Function")
    assert math.isclose(features["pos_dominance_fraction"], 0.7)


def test_pos_features_missing_dominance():
    features = pos_features({"dominant": "Noun", "dominance": float("nan"), "distribution": "Noun"})
    assert features["pos_dominance_fraction"] is None


def test_noun_split():
    assert split_noun("Noun", "mass") == "mass noun"
    assert split_noun("Noun", "count") == "count noun"
    assert split_noun("Noun", None) == "Noun"
    assert split_noun("Verb", "count") == "Verb"
    assert split_noun(None, "mass") is None

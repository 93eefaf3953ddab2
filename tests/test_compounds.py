"""Tests for compound membership."""
from conclex.features.compounds import build_compound_set, is_compound


def test_union_of_lists():
    compounds = build_compound_set([["bookcase"], ["teapot", "sunflower"], []])
    assert compounds == {"bookcase", "teapot", "sunflower"}


def test_membership_in_one_list_is_enough():
    compounds = build_compound_set([["bookcase"], [], []])
    assert is_compound("bookcase", compounds)
    assert not is_compound("table", compounds)


def test_case_is_not_normalized():
    compounds = build_compound_set([["Bookcase"]])
    assert not is_compound("bookcase", compounds)
    assert is_compound("Bookcase", compounds)

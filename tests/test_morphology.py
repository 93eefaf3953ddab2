"""Tests for suffix extraction and the has_suffix rules."""
from conclex.features.morphology import (
    SUFFIX_RULES,
    SuffixRule,
    has_suffix_flag,
    match_suffix,
    morphology_features,
    suffix_or_monomorphemic,
)


DECLARED_LABELS = [
    "-ly", "-y", "-er", "-ion", "-al", "-ness", "-ic", "-ate", "-able", "-est",
    "-ious", "-ity", "-ive", "-ant", "-ist", "-ize", "-less", "-ory", "-ful", "-ance",
]


class TestRules:

    def test_twenty_one_markers(self):
        assert len(SUFFIX_RULES) == 21
        assert all(rule.marker.startswith(">") for rule in SUFFIX_RULES)

    def test_declared_label_order(self):
        labels = []
        for rule in SUFFIX_RULES:
            if not labels or labels[-1] != rule.label:
                labels.append(rule.label)
        assert labels == DECLARED_LABELS


class TestMatchSuffix:

    def test_single_suffix(self):
        assert match_suffix("{(happy)}>ness>") == "-ness"
        assert match_suffix("{(quick)}>ly>") == "-ly"

    def test_no_suffix(self):
        assert match_suffix("{(table)}") is None
        assert match_suffix(None) is None

    def test_last_declared_rule_wins(self):
        # -er is declared after -ly, so it wins whatever the string order
        assert match_suffix("{(love)}>ly>>er>") == "-er"
        assert match_suffix("{(love)}>er>>ly>") == "-er"

    def test_later_rule_overrides_earlier(self):
        assert match_suffix("{(hope)}>ful>>ness>") == "-ful"

    def test_british_spelling(self):
        assert match_suffix("{(real)}>ise>") == "-ize"

    def test_custom_rule_order(self):
        rules = (SuffixRule(">er", "-er"), SuffixRule(">ly", "-ly"))
        assert match_suffix("{(love)}>er>>ly>", rules) == "-ly"


class TestHasSuffix:

    def test_defined_up_to_two_morphemes(self):
        assert has_suffix_flag(2, "-ness", "{(happy)}>ness>") == ("has suffix", "known")
        assert has_suffix_flag(1, None, "{(cat)}") == ("no suffix", "known")

    def test_not_applicable_above_two_morphemes(self):
        assert has_suffix_flag(3, "-ness", "{(un)}{(happy)}>ness>") == (None, "not applicable")

    def test_unknown_without_count_or_parse(self):
        assert has_suffix_flag(None, "-ly", ">ly>") == (None, "unknown")
        assert has_suffix_flag(2, None, None) == (None, "unknown")

    def test_features_force_null_for_long_words(self):
        features = morphology_features("{(un)}{(kind)}>ness>", 3)
        assert features["suffix_label"] == "-ness"
        assert features["has_suffix"] is None
        assert features["has_suffix_status"] == "not applicable"


class TestSuffixOrMonomorphemic:

    def test_monomorphemic(self):
        assert suffix_or_monomorphemic(1, None) == "monomorphemic"

    def test_suffix_label(self):
        assert suffix_or_monomorphemic(2, "-ness") == "-ness"

    def test_none_without_suffix(self):
        assert suffix_or_monomorphemic(2, None) is None
        assert suffix_or_monomorphemic(3, None) is None

    def test_missing_parse_is_none(self):
        features = morphology_features(float("nan"), 1)
        assert features["morph_parse"] is None
        assert features["suffix_or_monomorphemic"] == "monomorphemic"
        assert features["has_suffix"] is None

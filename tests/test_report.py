"""Tests for records and report serialization."""
import orjson

from conclex.analysis import AnalysisOutcome
from conclex.effects import GroupSummary, TwoGroupComparison
from conclex.records import COLUMNS, WordRecord, records_to_frame
from conclex.report import statistic_rows, summary_rows, write_word_table


def make_record(**overrides):
    fields = dict(word="cat", surface="cats", concreteness_mean=4.9, concreteness_sd=0.3, percent_known=1.0)
    fields.update(overrides)
    return WordRecord(**fields)


def test_word_table_jsonl(temp_dir):
    path = temp_dir / "nested" / "word_table.jsonl"
    write_word_table([make_record(pos_all=("Noun", "Verb")), make_record(word="dog", surface="dog")], path)

    lines = path.read_bytes().splitlines()
    first = orjson.loads(lines[0])
    assert list(first) == list(COLUMNS)
    assert first["pos_all"] == ["Noun", "Verb"]
    assert orjson.loads(lines[1])["morpheme_count"] is None


def test_records_to_frame_missing_counts_are_nan():
    frame = records_to_frame([make_record(morpheme_count=2), make_record(word="dog", surface="dog")])
    assert frame["morpheme_count"].isna().tolist() == [False, True]
    assert frame["is_compound"].tolist() == [False, False]


def test_statistic_and_summary_rows():
    comparison = TwoGroupComparison(
        factor="is_compound",
        groups=[GroupSummary("False", 3.0, 1.0, 10), GroupSummary("True", 4.0, 1.0, 5)],
        t_statistic=-1.9,
        p_value=0.08,
        df=13,
        cohens_d=-1.0,
    )
    outcomes = [
        AnalysisOutcome("compound", "full", 15, result=comparison),
        AnalysisOutcome("mass_count", "full", 0, error="no rows"),
    ]

    stats = statistic_rows(outcomes)
    assert stats[0]["test"] == "t-test"
    assert stats[0]["statistic"] == -1.9
    assert stats[0]["effect"] == -1.0
    assert stats[1]["ok"] is False
    assert stats[1]["statistic"] is None

    summaries = summary_rows(outcomes)
    assert [row["level"] for row in summaries] == ["False", "True"]

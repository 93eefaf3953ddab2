#!/usr/bin/env python3
"""
report.py - Write the working table and analysis results.

Outputs (in the output directory):
  - word_table.jsonl        one WordRecord per line
  - group_summaries.csv     dataset, analysis, level, mean, sd, n
  - variance_partition.csv  unique R^2 per predictor and dataset
  - analysis_report.json    every analysis outcome and the combined models
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import orjson
import pandas as pd

from conclex.analysis import AnalysisOutcome, CombinedOutcome
from conclex.records import WordRecord


logger = logging.getLogger(__name__)


WORD_TABLE = 'word_table.jsonl'
GROUP_SUMMARIES = 'group_summaries.csv'
VARIANCE_PARTITION = 'variance_partition.csv'
ANALYSIS_REPORT = 'analysis_report.json'


def write_word_table(records: Sequence[WordRecord], output_path: Path):
    """Write records as JSONL, fields in declaration order."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'wb') as f:
        for record in records:
            f.write(orjson.dumps(record.to_dict()) + b'\n')
    logger.info(f"  -> {output_path} ({len(records):,} records)")


def summary_rows(outcomes: Sequence[AnalysisOutcome]) -> List[Dict[str, Any]]:
    """Flatten per-level group summaries of successful analyses."""
    rows = []
    for outcome in outcomes:
        if not outcome.ok:
            continue
        for group in getattr(outcome.result, 'groups', []):
            rows.append({
                'dataset': outcome.dataset,
                'analysis': outcome.analysis,
                'level': group.level,
                'mean': group.mean,
                'sd': group.sd,
                'n': group.n,
            })
    return rows


def statistic_rows(outcomes: Sequence[AnalysisOutcome]) -> List[Dict[str, Any]]:
    """One row per outcome with its headline statistic, p-value and effect size."""
    rows = []
    for outcome in outcomes:
        result = outcome.result
        rows.append({
            'dataset': outcome.dataset,
            'analysis': outcome.analysis,
            'ok': outcome.ok,
            'error': outcome.error,
            'test': getattr(result, 'test', None) if result is not None else None,
            'statistic': getattr(result, 'statistic', None),
            'p_value': getattr(result, 'p_value', None),
            'effect': getattr(result, 'effect', None),
        })
    return rows


def outcome_to_dict(outcome: AnalysisOutcome) -> Dict[str, Any]:
    return {
        'analysis': outcome.analysis,
        'dataset': outcome.dataset,
        'n_rows': outcome.n_rows,
        'ok': outcome.ok,
        'error': outcome.error,
        'result': outcome.result.to_dict() if outcome.ok else None,
    }


def build_report(
    outcomes: Sequence[AnalysisOutcome],
    combined: Sequence[CombinedOutcome],
    dataset_sizes: Dict[str, int],
    excluded: Dict[str, Any],
) -> Dict[str, Any]:
    return {
        'datasets': dataset_sizes,
        'quality_filter': excluded,
        'analyses': [outcome_to_dict(o) for o in outcomes],
        'combined_model': [
            {
                'dataset': c.dataset,
                'ok': c.ok,
                'error': c.error,
                'result': c.model.to_dict() if c.ok else None,
            }
            for c in combined
        ],
    }


def write_reports(
    output_dir: Path,
    outcomes: Sequence[AnalysisOutcome],
    combined: Sequence[CombinedOutcome],
    partition: pd.DataFrame,
    dataset_sizes: Dict[str, int],
    excluded: Dict[str, Any],
):
    """Write summaries, partition and the JSON report."""
    output_dir.mkdir(parents=True, exist_ok=True)

    summaries = pd.DataFrame(
        summary_rows(outcomes),
        columns=['dataset', 'analysis', 'level', 'mean', 'sd', 'n'],
    )
    summaries.to_csv(output_dir / GROUP_SUMMARIES, index=False)
    logger.info(f"  -> {output_dir / GROUP_SUMMARIES} ({len(summaries):,} rows)")

    partition.to_csv(output_dir / VARIANCE_PARTITION)
    logger.info(f"  -> {output_dir / VARIANCE_PARTITION}")

    report = build_report(outcomes, combined, dataset_sizes, excluded)
    with open(output_dir / ANALYSIS_REPORT, 'wb') as f:
        f.write(orjson.dumps(report, option=orjson.OPT_INDENT_2 | orjson.OPT_SERIALIZE_NUMPY))
    logger.info(f"  -> {output_dir / ANALYSIS_REPORT}")

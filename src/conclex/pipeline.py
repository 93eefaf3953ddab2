#!/usr/bin/env python3
"""
Concreteness analysis pipeline.

Chains every stage of one run:
1. Load the lexical resources
2. Lemmatize, join and derive features (working table)
3. Quality filter and low-variability split
4. Factor analyses on both datasets
5. Combined model, VIFs and variance partition on both datasets
6. Reports and figures

Usage:
    uv run conclex \\
        --input-dir data/raw \\
        --output-dir data/results

Pipeline:
    resources -> lemmas -> features -> filters -> analyses -> reports
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from conclex.analysis import (
    ANALYSES,
    AnalysisOutcome,
    CombinedOutcome,
    partition_table,
    run_analyses,
    run_combined_model,
)
from conclex.config import load_config
from conclex.features.joiner import build_word_records
from conclex.filters import apply_quality_filter, split_datasets
from conclex.lemmas import Lemmatizer, make_wordnet_lemmatizer
from conclex.records import WordRecord, records_to_frame
from conclex.report import WORD_TABLE, write_reports, write_word_table
from conclex.resources import load_resources


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    records: List[WordRecord]
    table: pd.DataFrame = field(repr=False)
    datasets: Dict[str, pd.DataFrame] = field(repr=False)
    outcomes: List[AnalysisOutcome]
    combined: List[CombinedOutcome]
    partition: pd.DataFrame
    figures: List[Path] = field(default_factory=list)


def run_pipeline(
    input_dir: Path,
    output_dir: Path,
    config: Optional[Dict[str, Any]] = None,
    lemmatize: Optional[Lemmatizer] = None,
    render_plots: bool = True,
) -> PipelineResult:
    """
    Run the whole analysis once.

    Args:
        input_dir: Directory holding the declared resources
        output_dir: Directory for tables, reports and figures
        config: Analysis config (defaults when None)
        lemmatize: Lemmatizer callable (WordNet when None)
        render_plots: Write figures

    Raises:
        ResourceError: a declared resource is missing or malformed
    """
    config = config or load_config()

    logger.info("Concreteness analysis pipeline")
    logger.info(f"  Input: {input_dir}")
    logger.info(f"  Output: {output_dir}")

    # Stage 1
    logger.info("")
    resources = load_resources(input_dir, config)

    # Stage 2
    logger.info("")
    logger.info("Building word table...")
    if lemmatize is None:
        lemmatize = make_wordnet_lemmatizer()
    records = build_word_records(resources, lemmatize, config)
    table = records_to_frame(records)
    write_word_table(records, output_dir / WORD_TABLE)

    # Stage 3
    logger.info("")
    quality = apply_quality_filter(table, config['filters']['min_percent_known'])
    datasets = split_datasets(quality.retained)

    # Stage 4
    logger.info("")
    outcomes = run_analyses(datasets, ANALYSES)

    # Stage 5
    logger.info("")
    combined = run_combined_model(datasets, vif_threshold=config['models']['vif_threshold'])
    partition = partition_table(combined)

    # Stage 6
    logger.info("")
    logger.info("Writing reports...")
    write_reports(
        output_dir,
        outcomes,
        combined,
        partition,
        dataset_sizes={name: len(data) for name, data in datasets.items()},
        excluded={
            'threshold': config['filters']['min_percent_known'],
            'excluded_count': quality.excluded_count,
            'excluded_proportion': quality.excluded_proportion,
        },
    )

    figures: List[Path] = []
    if render_plots:
        # matplotlib is only needed when figures are requested
        from conclex.plots import plot_boxplots, plot_group_means, plot_partition

        figures_dir = output_dir / config['output']['figures_dir']
        logger.info("Rendering figures...")
        figures += plot_group_means(outcomes, figures_dir)
        figures += plot_boxplots(datasets, ANALYSES, figures_dir)
        figures += plot_partition(partition, figures_dir)

    return PipelineResult(
        records=records,
        table=table,
        datasets=datasets,
        outcomes=outcomes,
        combined=combined,
        partition=partition,
        figures=figures,
    )

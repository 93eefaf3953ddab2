"""
Figures for the factor analyses.

Bar charts are drawn from the finished group summaries, boxplots from the
restricted dataset rows, and one grouped bar chart shows the variance
partition. Everything is written as PNG with the Agg backend.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from conclex.analysis import BINARY, CATEGORICAL, OUTCOME, AnalysisOutcome, FactorAnalysis


logger = logging.getLogger(__name__)


def plot_group_means(outcomes: Sequence[AnalysisOutcome], figures_dir: Path) -> List[Path]:
    """One figure per analysis: mean +/- SD per level, a panel per dataset."""
    by_analysis: Dict[str, List[AnalysisOutcome]] = defaultdict(list)
    for outcome in outcomes:
        if outcome.ok and getattr(outcome.result, 'groups', None):
            by_analysis[outcome.analysis].append(outcome)

    figures_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for analysis, items in by_analysis.items():
        fig, axes = plt.subplots(1, len(items), figsize=(5 * len(items), 4), squeeze=False)
        for ax, outcome in zip(axes[0], items):
            groups = outcome.result.groups
            x = np.arange(len(groups))
            ax.bar(x, [g.mean for g in groups], yerr=[g.sd for g in groups],
                   color='#4C72B0', alpha=0.8, capsize=3)
            ax.set_xticks(x)
            ax.set_xticklabels([f"{g.level}\n(n={g.n})" for g in groups], rotation=45, ha='right', fontsize=8)
            ax.set_ylabel('Mean concreteness')
            ax.set_title(outcome.dataset)
        fig.suptitle(analysis)
        fig.tight_layout()

        path = figures_dir / f"means_{analysis}.png"
        fig.savefig(path, dpi=150)
        plt.close(fig)
        written.append(path)

    logger.info(f"  -> {len(written)} group-mean figures in {figures_dir}")
    return written


def plot_boxplots(
    datasets: Mapping[str, pd.DataFrame],
    analyses: Sequence[FactorAnalysis],
    figures_dir: Path,
    outcome: str = OUTCOME,
) -> List[Path]:
    """Boxplots of the outcome per level for binary and categorical analyses."""
    figures_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for analysis in analyses:
        if analysis.kind not in (BINARY, CATEGORICAL):
            continue

        panels = []
        for dataset, data in datasets.items():
            rows = analysis.rows(data)[[analysis.column, outcome]].dropna()
            if rows.empty:
                continue
            levels = sorted(rows[analysis.column].unique(), key=str)
            values = [rows.loc[rows[analysis.column] == level, outcome].to_numpy() for level in levels]
            panels.append((dataset, levels, values))
        if not panels:
            continue

        fig, axes = plt.subplots(1, len(panels), figsize=(5 * len(panels), 4), squeeze=False)
        for ax, (dataset, levels, values) in zip(axes[0], panels):
            ax.boxplot(values)
            ax.set_xticks(range(1, len(levels) + 1))
            ax.set_xticklabels([str(level) for level in levels], rotation=45, ha='right', fontsize=8)
            ax.set_ylabel('Concreteness')
            ax.set_title(dataset)
        fig.suptitle(analysis.description)
        fig.tight_layout()

        path = figures_dir / f"box_{analysis.name}.png"
        fig.savefig(path, dpi=150)
        plt.close(fig)
        written.append(path)

    logger.info(f"  -> {len(written)} boxplots in {figures_dir}")
    return written


def plot_partition(partition: pd.DataFrame, figures_dir: Path) -> List[Path]:
    """Grouped bars of unique R^2 per predictor, one bar per dataset."""
    if partition.empty:
        return []

    figures_dir.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(6, 4))
    x = np.arange(len(partition.index))
    width = 0.8 / max(len(partition.columns), 1)
    for i, dataset in enumerate(partition.columns):
        ax.bar(x + i * width, partition[dataset].to_numpy(), width, label=str(dataset))
    ax.set_xticks(x + width * (len(partition.columns) - 1) / 2)
    ax.set_xticklabels(partition.index, rotation=20, ha='right')
    ax.set_ylabel('Unique R²')
    ax.axhline(0, color='black', linewidth=0.5)
    ax.legend()
    fig.tight_layout()

    path = figures_dir / "variance_partition.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info(f"  -> {path}")
    return [path]

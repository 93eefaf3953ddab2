#!/usr/bin/env python3
"""
conclex - Run the concreteness analysis from the command line.

Reads the declared resources from an input directory, writes the working
table, reports and figures to an output directory, and prints the group
summaries, test statistics and variance partition.

Exit status is 1 when a resource or the config file is missing or malformed.
"""

import argparse
import logging
import sys
from pathlib import Path

from conclex.config import load_config, load_default_schema
from conclex.console import render_group_summaries, render_partition, render_statistics
from conclex.errors import ConclexError
from conclex.pipeline import run_pipeline
from conclex.report import statistic_rows, summary_rows


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Linguistic predictors of word concreteness',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example:
    conclex --input-dir data/raw --output-dir data/results
    conclex --input-dir data/raw --output-dir data/results --config my_analysis.yaml
        """
    )
    parser.add_argument('--input-dir', type=Path, required=True,
                        help='Directory with the lexical resources')
    parser.add_argument('--output-dir', type=Path, required=True,
                        help='Directory for tables, reports and figures')
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML config merged over the defaults (default: schema/analysis.yaml)')
    parser.add_argument('--no-plots', action='store_true',
                        help='Skip figure rendering')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config) if args.config else load_default_schema()
        result = run_pipeline(
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            config=config,
            render_plots=not args.no_plots,
        )
    except ConclexError as e:
        logger.error(str(e))
        return 1

    render_group_summaries("Group summaries", summary_rows(result.outcomes))
    render_statistics("Analyses", statistic_rows(result.outcomes))
    if not result.partition.empty:
        render_partition("Unique variance contribution (R²)", result.partition)

    logger.info("")
    logger.info("Concreteness analysis complete")
    return 0


if __name__ == '__main__':
    sys.exit(main())

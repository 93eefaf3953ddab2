#!/usr/bin/env python3
"""
resources.py - Load the raw lexical resources.

Reads (file names and column names from the 'resources' config section):
  - concreteness norms (word, mean rating, SD, proportion of raters who knew the word)
  - part-of-speech norms (dominant POS, its share, full POS distribution)
  - lexicon project items (letters, phonemes, morphemes)
  - countability incidence table (lemma x grammatical class)
  - etymology table (word -> raw origin label)
  - two morpheme segmentation tables (suffixed / unsuffixed words)
  - three compound word lists (one word per line)

Tables are loaded as-is: source columns are renamed to canonical names and
declared numeric columns are coerced, nothing else. A missing file or
column is fatal (ResourceError).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

import pandas as pd

from conclex.console import StageDisplay
from conclex.errors import ResourceError


logger = logging.getLogger(__name__)


TABLE_RESOURCES = (
    'concreteness',
    'pos',
    'lexicon',
    'countability',
    'etymology',
    'morph_suffixed',
    'morph_unsuffixed',
)


@dataclass(frozen=True)
class LexicalResources:
    """All raw inputs of one analysis run."""
    concreteness: pd.DataFrame
    pos: pd.DataFrame
    lexicon: pd.DataFrame
    countability: pd.DataFrame
    etymology: pd.DataFrame
    morph_suffixed: pd.DataFrame
    morph_unsuffixed: pd.DataFrame
    compound_lists: Tuple[Tuple[str, ...], ...]


def load_table(path: Path, name: str, spec: Dict[str, Any]) -> pd.DataFrame:
    """
    Load one tabular resource and rename its columns to canonical names.

    Args:
        path: CSV/TSV file
        name: Resource name (used in error messages)
        spec: Resource config with 'columns' (canonical -> source),
              optional 'sep' and 'numeric' (canonical names to coerce)

    Returns:
        DataFrame with exactly the canonical columns

    Raises:
        ResourceError: file missing, unparsable, or lacking a declared column
    """
    if not path.exists():
        raise ResourceError(name, f"file not found: {path}")

    # Everything as text first: words like "null" or "nan" must survive
    try:
        raw = pd.read_csv(
            path,
            sep=spec.get('sep', ','),
            dtype=str,
            keep_default_na=False,
            na_values=[''],
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ResourceError(name, f"could not parse {path.name}: {e}") from e

    columns: Dict[str, str] = spec['columns']
    missing = [source for source in columns.values() if source not in raw.columns]
    if missing:
        raise ResourceError(name, f"missing column(s) {', '.join(missing)} in {path.name}")

    table = pd.DataFrame({canonical: raw[source] for canonical, source in columns.items()})

    for canonical in spec.get('numeric', []):
        table[canonical] = pd.to_numeric(table[canonical], errors='coerce')

    logger.info(f"  -> Loaded {len(table):,} rows from {path.name}")
    return table


def load_word_list(path: Path, name: str) -> Tuple[str, ...]:
    """Load a plain word list, one entry per line, blank lines skipped."""
    if not path.exists():
        raise ResourceError(name, f"file not found: {path}")

    words = []
    try:
        with open(path, 'r', encoding='utf-8') as f:
            for line in f:
                word = line.rstrip('\r\n')
                if word:
                    words.append(word)
    except UnicodeDecodeError as e:
        raise ResourceError(name, f"could not decode {path.name} as UTF-8: {e}") from e

    logger.info(f"  -> Loaded {len(words):,} words from {path.name}")
    return tuple(words)


def load_resources(input_dir: Path, config: Dict[str, Any]) -> LexicalResources:
    """
    Load every declared resource from input_dir.

    Raises:
        ResourceError: on the first missing or malformed resource
    """
    if not input_dir.is_dir():
        raise ResourceError('input', f"input directory not found: {input_dir}")

    specs = config['resources']
    logger.info(f"Loading lexical resources from {input_dir}")

    tables: Dict[str, pd.DataFrame] = {}
    with StageDisplay("Loading resources") as display:
        for name in TABLE_RESOURCES:
            spec = specs[name]
            tables[name] = load_table(input_dir / spec['file'], name, spec)
            display.update(**{name: len(tables[name])})

        compound_lists = []
        for i, filename in enumerate(specs['compounds']['files'], 1):
            words = load_word_list(input_dir / filename, f"compounds[{i}]")
            compound_lists.append(words)
            display.update(**{f"compounds[{i}]": len(words)})

    return LexicalResources(compound_lists=tuple(compound_lists), **tables)

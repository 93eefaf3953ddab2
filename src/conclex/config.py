"""
Analysis configuration.

Defaults are defined here; schema/analysis.yaml at the project root ships the
same values as an editable starting point. A user file passed with --config
is deep-merged over the defaults, so it only needs the keys it changes:

    filters:
      min_percent_known: 0.9
    resources:
      etymology:
        file: etym_2021.csv
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from conclex.errors import ConfigError


logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    'resources': {
        'concreteness': {
            'file': 'concreteness.csv',
            'sep': ',',
            'columns': {
                'word': 'Word',
                'mean': 'Conc.M',
                'sd': 'Conc.SD',
                'percent_known': 'Percent_known',
            },
            'numeric': ['mean', 'sd', 'percent_known'],
        },
        'pos': {
            'file': 'subtlex_pos.csv',
            'sep': ',',
            'columns': {
                'word': 'Word',
                'dominant': 'Dom_PoS_SUBTLEX',
                'dominance': 'Percentage_dom_PoS',
                'distribution': 'All_PoS_SUBTLEX',
            },
            'numeric': ['dominance'],
        },
        'lexicon': {
            'file': 'elp_items.csv',
            'sep': ',',
            'columns': {
                'word': 'Word',
                'letters': 'Length',
                'phonemes': 'NPhon',
                'morphemes': 'NMorph',
            },
            'numeric': ['letters', 'phonemes', 'morphemes'],
        },
        'countability': {
            'file': 'countability.csv',
            'sep': ',',
            'columns': {
                'lemma': 'lemma',
                'class': 'major_class',
            },
            'numeric': [],
        },
        'etymology': {
            'file': 'etymology.csv',
            'sep': ',',
            'columns': {
                'word': 'word',
                'origin': 'origin',
            },
            'numeric': [],
        },
        'morph_suffixed': {
            'file': 'morph_suffixed.csv',
            'sep': ',',
            'columns': {
                'word': 'Word',
                'parse': 'MorphSp',
            },
            'numeric': [],
        },
        'morph_unsuffixed': {
            'file': 'morph_unsuffixed.csv',
            'sep': ',',
            'columns': {
                'word': 'Word',
                'parse': 'MorphSp',
            },
            'numeric': [],
        },
        'compounds': {
            'files': ['compounds_a.txt', 'compounds_b.txt', 'compounds_c.txt'],
        },
    },
    'lemmas': {
        'exception_pattern': 'est',
    },
    'filters': {
        'min_percent_known': 0.95,
    },
    'etymology': {
        'large_class_threshold': 100,
    },
    'models': {
        'vif_threshold': 5.0,
    },
    'output': {
        'figures_dir': 'figures',
    },
}


def get_schema_dir() -> Path:
    """Get the schema directory path at the project root."""
    # From src/conclex/ go up to project root
    return Path(__file__).parent.parent.parent / "schema"


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge override into a copy of base.

    Nested dicts are merged key by key; any other value (including lists)
    replaces the base value outright.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def validate_config(config: Dict[str, Any], source: Optional[Path] = None):
    """
    Check that every default section (and every resource entry) is still a
    mapping after merging.

    Raises:
        ConfigError: naming the first section with the wrong shape
    """
    origin = f" in {source}" if source else ""
    for section in DEFAULT_CONFIG:
        if not isinstance(config.get(section), dict):
            raise ConfigError(f"Section '{section}'{origin} must be a mapping")
    for name in DEFAULT_CONFIG['resources']:
        if not isinstance(config['resources'].get(name), dict):
            raise ConfigError(f"Resource '{name}'{origin} must be a mapping")


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the analysis configuration.

    Args:
        config_path: Optional YAML file merged over the defaults

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: if the file is missing, unparsable, or not a mapping
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {config_path} must be a mapping")

    config = merge_config(DEFAULT_CONFIG, data)
    validate_config(config, config_path)
    logger.info(f"Loaded config overrides from {config_path}")
    return config


def load_default_schema() -> Dict[str, Any]:
    """Load schema/analysis.yaml, falling back to the built-in defaults."""
    schema_path = get_schema_dir() / "analysis.yaml"
    if not schema_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    return load_config(schema_path)

"""Pytest configuration and shared fixtures."""
import tempfile
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from conclex.resources import LexicalResources


# Inflected forms used across tests; everything else is its own lemma
LEMMAS = {
    "cats": "cat",
    "dogs": "dog",
    "ran": "run",
    "running": "run",
    "boxes": "box",
    "forests": "forest",
    "geese": "goose",
}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_lemmatizer():
    """Dictionary-backed lemmatizer (no WordNet download)."""
    return lambda word: LEMMAS.get(word, word)


@pytest.fixture
def lexical_resources():
    """Small in-memory resources with canonical column names."""
    concreteness = pd.DataFrame({
        "word": ["cats", "the", "table", "croissant", "freedom", "cat"],
        "mean": [4.9, 1.5, 4.8, 4.7, 1.6, 4.2],
        "sd": [0.3, 1.2, 0.5, 0.6, 1.0, 0.9],
        "percent_known": [1.0, 1.0, 0.98, 0.96, 1.0, 1.0],
    })
    pos = pd.DataFrame({
        "word": ["cat", "the", "table", "croissant", "freedom", "table"],
        "dominant": ["Noun", "Determiner", "Noun", "Noun", "Noun", "Verb"],
        "dominance": [0.95, 1.0, 0.9, 1.0, 1.0, 0.1],
        "distribution": ["Noun.Verb", "Determiner.Name", "Noun.Verb", "Noun", "Noun", "Verb"],
    })
    lexicon = pd.DataFrame({
        "word": ["cat", "the", "table", "croissant", "freedom"],
        "letters": [3, 3, 5, 9, 7],
        "phonemes": [3, 2, 4, 7, 6],
        "morphemes": [1, 1, 1, 1, 2],
    })
    countability = pd.DataFrame({
        "lemma": ["cat", "cat", "table", "freedom", "freedom"],
        "class": ["count", "count", "count", "mass", "count"],
    })
    etymology = pd.DataFrame({
        "word": ["cat", "table", "croissant", "freedom"],
        "origin": ["Old English", "Old French", "French", "Old English"],
    })
    morph_suffixed = pd.DataFrame({
        "word": ["freedom"],
        "parse": ["{(free)}>dom>"],
    })
    morph_unsuffixed = pd.DataFrame({
        "word": ["cat", "table", "the"],
        "parse": ["{(cat)}", "{(table)}", "{(the)}"],
    })
    return LexicalResources(
        concreteness=concreteness,
        pos=pos,
        lexicon=lexicon,
        countability=countability,
        etymology=etymology,
        morph_suffixed=morph_suffixed,
        morph_unsuffixed=morph_unsuffixed,
        compound_lists=(("bookcase",), ("croissant", "teapot"), ("sunflower",)),
    )


@pytest.fixture
def analysis_table():
    """
    Synthetic working table with known effects.

    Nouns are more concrete, each extra morpheme lowers concreteness, and
    French-origin words are slightly more concrete.
    """
    rng = np.random.default_rng(7)
    n = 300
    pos = rng.choice(["Noun", "Verb", "Adjective", "Function"], size=n)
    mass_count = [
        choice if p == "Noun" else None
        for p, choice in zip(pos, rng.choice(["mass", "count"], size=n))
    ]
    pos_split = [p if m is None else f"{m} noun" for p, m in zip(pos, mass_count)]
    morphemes = rng.integers(1, 5, size=n).astype(float)
    etymology = rng.choice(["French", "Other"], size=n)
    is_compound = rng.random(size=n) < 0.15

    mean = (
        2.5
        + 1.2 * (pos == "Noun")
        - 0.3 * morphemes
        + 0.2 * (etymology == "French")
        + rng.normal(0, 0.4, size=n)
    )

    has_suffix = [
        choice if m <= 2 else None
        for m, choice in zip(morphemes, rng.choice(["has suffix", "no suffix"], size=n))
    ]

    return pd.DataFrame({
        "word": [f"w{i}" for i in range(n)],
        "concreteness_mean": mean,
        "concreteness_sd": rng.uniform(0.3, 1.5, size=n),
        "percent_known": rng.uniform(0.9, 1.0, size=n),
        "pos_dominant": pos,
        "pos_with_noun_split": pos_split,
        "mass_count_class": mass_count,
        "morpheme_count": morphemes,
        "letters": morphemes * 3 + rng.integers(0, 3, size=n),
        "etymology_group": np.where(etymology == "French", "French", rng.choice(["Latin", "Other"], size=n)),
        "etymology_simple": etymology,
        "etymology_raw": np.where(etymology == "French", "Old French", "Old English"),
        "etymology_frequency_class": "large",
        "has_suffix": has_suffix,
        "suffix_or_monomorphemic": np.where(morphemes == 1, "monomorphemic", rng.choice(["-ness", "-er"], size=n)),
        "is_compound": is_compound,
    })


def write_resource_dir(directory: Path, n_words: int = 120) -> Path:
    """Write a complete set of input files with default names and columns."""
    words = [f"item{i}" for i in range(n_words)]
    pos_cycle = ["Noun", "Verb", "Adjective", "Determiner", "Noun", "Noun"]
    origin_cycle = ["Old French", "Old English", "Latin", "Greek", "Klingon"]
    suffix_cycle = ["{(item)}>ness>", "{(item)}>er>", "{(item)}>ly>"]

    pd.DataFrame({
        "Word": words,
        "Conc.M": [1.0 + (i * 37 % 40) / 10 for i in range(n_words)],
        "Conc.SD": [0.4 + (i * 13 % 11) / 10 for i in range(n_words)],
        "Percent_known": [0.9 if i % 10 == 0 else 1.0 for i in range(n_words)],
    }).to_csv(directory / "concreteness.csv", index=False)

    pd.DataFrame({
        "Word": words,
        "Dom_PoS_SUBTLEX": [pos_cycle[i % len(pos_cycle)] for i in range(n_words)],
        "Percentage_dom_PoS": [0.8] * n_words,
        "All_PoS_SUBTLEX": [pos_cycle[i % len(pos_cycle)] + ".Verb" for i in range(n_words)],
    }).to_csv(directory / "subtlex_pos.csv", index=False)

    pd.DataFrame({
        "Word": words,
        "Length": [len(w) for w in words],
        "NPhon": [len(w) - 1 for w in words],
        "NMorph": [1 + i % 3 for i in range(n_words)],
    }).to_csv(directory / "elp_items.csv", index=False)

    nouns = [w for i, w in enumerate(words) if pos_cycle[i % len(pos_cycle)] == "Noun"]
    pd.DataFrame({
        "lemma": nouns,
        "major_class": ["count" if i % 2 else "mass" for i in range(len(nouns))],
    }).to_csv(directory / "countability.csv", index=False)

    pd.DataFrame({
        "word": words,
        "origin": [origin_cycle[i % len(origin_cycle)] for i in range(n_words)],
    }).to_csv(directory / "etymology.csv", index=False)

    suffixed = [w for i, w in enumerate(words) if i % 3 == 1]
    pd.DataFrame({
        "Word": suffixed,
        "MorphSp": [suffix_cycle[i % len(suffix_cycle)] for i in range(len(suffixed))],
    }).to_csv(directory / "morph_suffixed.csv", index=False)

    unsuffixed = [w for i, w in enumerate(words) if i % 3 != 1]
    pd.DataFrame({
        "Word": unsuffixed,
        "MorphSp": ["{(item)}"] * len(unsuffixed),
    }).to_csv(directory / "morph_unsuffixed.csv", index=False)

    for name, members in (
        ("compounds_a.txt", words[::7]),
        ("compounds_b.txt", words[3::11]),
        ("compounds_c.txt", ["bookcase"]),
    ):
        (directory / name).write_text("\n".join(members) + "\n", encoding="utf-8")

    return directory


@pytest.fixture
def resource_dir(temp_dir):
    """Input directory with every default resource file."""
    input_dir = temp_dir / "input"
    input_dir.mkdir()
    return write_resource_dir(input_dir)

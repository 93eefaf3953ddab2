"""
WordRecord - one row of the working table.

Records are frozen; every pipeline step builds new records or new tables.
"""

from dataclasses import asdict, dataclass, fields
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd


@dataclass(frozen=True)
class WordRecord:
    word: str
    surface: str
    concreteness_mean: float
    concreteness_sd: float
    percent_known: float

    pos_dominant: Optional[str] = None
    pos_all: Optional[Tuple[str, ...]] = None
    pos_dominance_fraction: Optional[float] = None

    letters: Optional[int] = None
    phonemes: Optional[int] = None
    morpheme_count: Optional[int] = None

    etymology_raw: Optional[str] = None
    etymology_group: Optional[str] = None
    etymology_simple: Optional[str] = None
    etymology_frequency_class: Optional[str] = None

    morph_parse: Optional[str] = None
    suffix_label: Optional[str] = None
    has_suffix: Optional[str] = None
    has_suffix_status: str = 'unknown'
    suffix_or_monomorphemic: Optional[str] = None

    is_compound: bool = False
    mass_count_class: Optional[str] = None
    pos_with_noun_split: Optional[str] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        if data['pos_all'] is not None:
            data['pos_all'] = list(data['pos_all'])
        return data


COLUMNS: Tuple[str, ...] = tuple(f.name for f in fields(WordRecord))

# Integer counts become float columns so None turns into NaN for modeling
NUMERIC_COLUMNS = (
    'concreteness_mean', 'concreteness_sd', 'percent_known',
    'pos_dominance_fraction', 'letters', 'phonemes', 'morpheme_count',
)


def records_to_frame(records: Sequence[WordRecord]) -> pd.DataFrame:
    """Build the working table, one row per record, columns in field order."""
    rows: List[Dict] = [asdict(record) for record in records]
    frame = pd.DataFrame(rows, columns=list(COLUMNS))
    for column in NUMERIC_COLUMNS:
        frame[column] = pd.to_numeric(frame[column], errors='coerce').astype(float)
    frame['is_compound'] = frame['is_compound'].astype(bool)
    return frame

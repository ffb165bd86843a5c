from __future__ import annotations
import csv
import logging
from collections import Counter
from types import MappingProxyType
from typing import Dict, Iterable, List

from .config import TITLE_COLUMN, RATING_COLUMN, VERBOSE
from .errors import DatasetError
from .models import Record, DatasetIndexes
from .normalize import normalize, tokenize

log = logging.getLogger(__name__)

# Progress logging (set PROMPTER_VERBOSE=1 to enable)
PROGRESS_EVERY_ROWS = 10_000

def _iter_rows(path: str) -> Iterable[tuple[int, List[str]]]:
    """Yield (line_no, fields) for every data row; header is checked and skipped."""
    try:
        f = open(path, "r", encoding="utf-8", newline="")
    except OSError as exc:
        raise DatasetError(f"cannot open dataset {path!r}: {exc}") from exc
    with f:
        reader = csv.reader(f)
        try:
            header = next(reader, None)
            if header is None:
                raise DatasetError(f"{path}: empty dataset (no header row)")
            width = len(header)
            for fields in reader:
                if not fields:
                    continue  # blank line
                if len(fields) != width:
                    raise DatasetError(
                        f"{path}:{reader.line_num}: wrong number of fields "
                        f"(expected {width}, got {len(fields)})"
                    )
                yield reader.line_num, fields
        except csv.Error as exc:
            raise DatasetError(f"{path}:{reader.line_num}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise DatasetError(f"{path}: not valid UTF-8 ({exc.reason})") from exc

def parse_dataset(path: str, with_ratings: bool = True) -> List[Record]:
    """
    Read the movie CSV into Records.
    Column 2 is the title; column 9 the rating (only read when with_ratings).
    Any unreadable file or malformed row raises DatasetError.
    """
    need = RATING_COLUMN if with_ratings else TITLE_COLUMN
    records: List[Record] = []
    for line_no, fields in _iter_rows(path):
        if len(fields) <= need:
            raise DatasetError(f"{path}:{line_no}: row has no column {need + 1}")
        rating = fields[RATING_COLUMN] if with_ratings else None
        records.append(Record(title=fields[TITLE_COLUMN], rating=rating))
        if VERBOSE and len(records) % PROGRESS_EVERY_ROWS == 0:
            print(f"[parsed] rows={len(records):,}")
    return records

def build_indexes(records: Iterable[Record], with_ratings: bool = True) -> DatasetIndexes:
    """
    Build the token frequency map and the title -> rating lookup.
    Empty tokens (runs of spaces in a title) are not counted.
    """
    words: Counter[str] = Counter()
    ratings: Dict[str, str] = {}
    n = 0
    for r in records:
        clean = normalize(r.title)
        if with_ratings and r.rating is not None:
            ratings[clean] = r.rating
        words.update(w for w in tokenize(clean) if w)
        n += 1
    return DatasetIndexes(
        frequencies=MappingProxyType(dict(words)),
        ratings=MappingProxyType(ratings),
        records=n,
    )

def load_dataset(path: str, with_ratings: bool = True) -> DatasetIndexes:
    """Parse the dataset at `path` and index it. Runs once at startup."""
    log.info("Loading dataset from %s (ratings=%s)", path, with_ratings)
    records = parse_dataset(path, with_ratings=with_ratings)
    indexes = build_indexes(records, with_ratings=with_ratings)
    log.info("Indexed %d titles: %d distinct words, %d rated titles",
             indexes.records, len(indexes.frequencies), len(indexes.ratings))
    return indexes

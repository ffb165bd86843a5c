from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple

STATUS_OK = "ok"
STATUS_REMOTE_UNAVAILABLE = "remote_unavailable"

@dataclass(frozen=True)
class Record:
    title: str                # raw title as stored in the dataset
    rating: Optional[str]     # None when ratings are not captured

@dataclass(frozen=True)
class DatasetIndexes:
    frequencies: Mapping[str, int]   # normalized token -> occurrence count
    ratings: Mapping[str, str]       # normalized title -> rating string
    records: int = 0

    def rating_of(self, title: str) -> str:
        """Rating for a normalized title; "" (lowest) when unknown."""
        return self.ratings.get(title, "")

@dataclass(frozen=True)
class CandidateSet:
    items: Tuple[str, ...]
    capacity: int
    status: str = STATUS_OK

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, i: int) -> str:
        return self.items[i]

    @property
    def remote_ok(self) -> bool:
        return self.status == STATUS_OK

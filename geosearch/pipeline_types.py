"""Typed containers shared across search modules."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class MatchKind(str, Enum):
    CITY = "CITY"
    DISTRICT = "DISTRICT"


class SearchStatus(str, Enum):
    OK = "OK"
    BAD_QUERY = "BAD_QUERY"
    NO_MATCH = "NO_MATCH"


@dataclass(frozen=True)
class MatchCandidate:
    """Score accumulated by one (entry, field) pair across query tokens."""

    found: bool = False
    score: float = 0.0
    name: Optional[str] = None
    city: Optional[str] = None
    kind: Optional[MatchKind] = None

    def add_hit(self, rate: float, name: str, city: str, kind: MatchKind) -> "MatchCandidate":
        # identity fields follow the latest hit; only the score sums up
        return replace(self, found=True, score=self.score + rate, name=name, city=city, kind=kind)

from __future__ import annotations

"""
Fuzzy search over the location catalog.

A query is folded (diacritics stripped, lower-cased) and split on single
spaces. Every token is tested against the folded city and district of each
entry with a symmetric containment check; hits are weighted with a
length-ratio score and summed per (entry, field). Candidates are then
stable-sorted by score and deduplicated by name.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from . import config
from .config import CatalogEntry, SearchResult
from .normalize import fold, normalize
from .pipeline_types import MatchCandidate, MatchKind, SearchStatus


def _stripped_len(text: str) -> int:
    # only the first space is removed, as the legacy scorer did
    return len(text.replace(" ", "", 1))


def tokenize_query(folded_query: str, keep_empty: bool = False) -> List[str]:
    """Split on single spaces; no de-duplication, no stop words."""
    tokens = folded_query.split(" ")
    if keep_empty:
        return tokens
    return [t for t in tokens if t]


def length_ratio(token: str, field_len: int, ref_len: int) -> Optional[float]:
    """
    min(len(token) / field_len, ref_len / len(token)).

    Returns None when the field has no length left to compare against.
    An empty token scores 0.0 (its second ratio is unbounded).
    """
    if field_len <= 0:
        return None
    if not token:
        return 0.0
    return min(len(token) / field_len, ref_len / len(token))


def _is_contained(token: str, field: str) -> bool:
    return token in field or field in token


def _score_field(
    tokens: Iterable[str],
    folded_field: str,
    ref_len: int,
    name: str,
    city: str,
    kind: MatchKind,
) -> MatchCandidate:
    field_len = _stripped_len(folded_field)
    candidate = MatchCandidate()
    for token in tokens:
        if not _is_contained(token, folded_field):
            continue
        rate = length_ratio(token, field_len, ref_len)
        if rate is None:
            continue
        candidate = candidate.add_hit(rate, name=name, city=city, kind=kind)
    return candidate


def score_entry(
    entry: CatalogEntry,
    tokens: Sequence[str],
    district_rate_uses_city_length: bool = True,
) -> List[MatchCandidate]:
    """Return the city and/or district candidates an entry produces, in that order."""
    folded_city = fold(entry.city)
    folded_district = fold(entry.district)
    city_len = _stripped_len(folded_city)

    city_hit = _score_field(
        tokens, folded_city, city_len, entry.city, entry.city, MatchKind.CITY
    )
    district_ref = city_len if district_rate_uses_city_length else _stripped_len(folded_district)
    district_hit = _score_field(
        tokens, folded_district, district_ref, entry.district, entry.city, MatchKind.DISTRICT
    )
    return [c for c in (city_hit, district_hit) if c.found]


def rank_candidates(candidates: Iterable[MatchCandidate]) -> List[MatchCandidate]:
    """Stable sort by score descending, then keep the first hit per name."""
    ordered = sorted(candidates, key=lambda c: -c.score)
    seen = set()
    deduped: List[MatchCandidate] = []
    for c in ordered:
        if c.name in seen:
            continue
        seen.add(c.name)
        deduped.append(c)
    return deduped


def to_search_result(candidate: MatchCandidate) -> SearchResult:
    return SearchResult(
        found=candidate.found,
        rate=candidate.score,
        name=candidate.name,
        city=candidate.city,
        type=candidate.kind.value if candidate.kind else "",
    )


def search(
    query: str,
    catalog: Sequence[CatalogEntry],
    district_rate_uses_city_length: Optional[bool] = None,
    keep_empty_tokens: Optional[bool] = None,
) -> Tuple[List[SearchResult], SearchStatus]:
    """
    Rank catalog entries against a free-text query.

    Returns (results, status):
      - ([], BAD_QUERY) if the normalized query is shorter than MIN_QUERY_LENGTH
      - ([], NO_MATCH) if nothing matched
      - (results, OK) otherwise, best first

    The two keyword switches default to the values in config.
    """
    if district_rate_uses_city_length is None:
        district_rate_uses_city_length = config.SEARCH_DISTRICT_RATE_USES_CITY_LENGTH
    if keep_empty_tokens is None:
        keep_empty_tokens = config.SEARCH_KEEP_EMPTY_TOKENS

    normalized = normalize(query)
    if len(normalized) < config.MIN_QUERY_LENGTH:
        return [], SearchStatus.BAD_QUERY

    tokens = tokenize_query(fold(query), keep_empty=keep_empty_tokens)

    candidates: List[MatchCandidate] = []
    for entry in catalog:
        candidates.extend(score_entry(entry, tokens, district_rate_uses_city_length))

    ranked = rank_candidates(candidates)
    logger.debug(
        "search {!r}: {} tokens, {} candidates, {} after dedup",
        query, len(tokens), len(candidates), len(ranked),
    )
    if not ranked:
        return [], SearchStatus.NO_MATCH
    return [to_search_result(c) for c in ranked], SearchStatus.OK

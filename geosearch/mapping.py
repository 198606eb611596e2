from __future__ import annotations
"""
Mapping utilities to convert search outcomes and catalog entries into API
responses.

Centralises the status -> HTTP code policy of GET /search/{query} so the
route handler and the CLI render results identically.
"""

from typing import Any, List, Sequence, Tuple

from loguru import logger

from .config import (
    BAD_QUERY_MESSAGE,
    CatalogEntry,
    CityUnits,
    DistrictUnits,
    ErrorResponse,
    NoMatchResponse,
    SearchResult,
)
from .pipeline_types import SearchStatus

_STATUS_CODES = {
    SearchStatus.OK: 200,
    SearchStatus.BAD_QUERY: 400,
    SearchStatus.NO_MATCH: 404,
}


def map_search_to_response(
    results: Sequence[SearchResult],
    status: SearchStatus,
) -> Tuple[int, Any]:
    """
    Convert a (results, status) pair into (http_status, json_body).

    - OK        -> 200, list of {found, rate, name, city, type}
    - BAD_QUERY -> 400, {error}
    - NO_MATCH  -> 404, single placeholder object with nulls
    """
    code = _STATUS_CODES[status]
    if status is SearchStatus.BAD_QUERY:
        return code, ErrorResponse(error=BAD_QUERY_MESSAGE).model_dump()
    if status is SearchStatus.NO_MATCH:
        return code, NoMatchResponse().model_dump()
    body: List[dict] = [r.model_dump() for r in results]
    logger.debug("Mapped {} search results into API schema", len(body))
    return code, body


def to_city_units(city: str, units: int) -> CityUnits:
    return CityUnits(city=city, units=units)


def to_district_units(entry: CatalogEntry) -> DistrictUnits:
    return DistrictUnits(city=entry.city, district=entry.district, units=entry.units)

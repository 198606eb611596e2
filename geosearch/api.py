from __future__ import annotations

"""
FastAPI application for the location lookup service.

- Read-only: the catalog is loaded once and shared by every request
- Exact lookups fold diacritics and case ('kadikoy' finds 'Kadıköy')
- GET /search/{query} returns ranked fuzzy matches (see search.py)
"""

import argparse
import json
import sys
from typing import List, Optional, Sequence, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from . import config
from .config import CatalogEntry, HealthResponse
from ._singletons import get_catalog
from .catalog_build import (
    city_units,
    get_city,
    get_district,
    list_cities,
    list_districts,
    load_catalog,
)
from .mapping import map_search_to_response, to_city_units, to_district_units
from .search import search


# -----------------------
# Pipeline
# -----------------------

def run_search(query: str, catalog: Sequence[CatalogEntry]) -> Tuple[int, object]:
    """Search and map the outcome to (http_status, body)."""
    if len(query) > config.MAX_QUERY_CHARS:
        logger.warning("Query truncated from {} to {} chars", len(query), config.MAX_QUERY_CHARS)
        query = query[: config.MAX_QUERY_CHARS]
    results, status = search(query, catalog)
    logger.info("Search {!r} -> {} ({} results)", query, status.value, len(results))
    return map_search_to_response(results, status)


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI(title="geosearch")
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

_catalog: Optional[Tuple[CatalogEntry, ...]] = None


@app.on_event("startup")
def startup_event() -> None:
    global _catalog
    logger.info("Starting app warmup...")
    try:
        _catalog = get_catalog()
        logger.info("Loaded catalog with {} entries", len(_catalog))
    except (OSError, ValueError) as e:
        _catalog = None
        logger.error("Failed to load catalog from {}: {}", config.CATALOG_PATH, e)
    logger.info("Warmup complete.")


def _require_catalog() -> Tuple[CatalogEntry, ...]:
    global _catalog
    if _catalog is None:
        try:
            _catalog = get_catalog()
        except (OSError, ValueError) as e:
            logger.error("Catalog unavailable: {}", e)
            raise HTTPException(status_code=500, detail="Catalog not loaded")
    return _catalog


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.get("/")
def all_locations() -> List[dict]:
    return [e.model_dump() for e in _require_catalog()]


@app.get("/cities")
def cities() -> List[str]:
    return list_cities(_require_catalog())


@app.get("/districts")
def districts() -> List[str]:
    return list_districts(_require_catalog())


@app.get("/search/{query}")
def search_locations(query: str):
    code, body = run_search(query, _require_catalog())
    return JSONResponse(status_code=code, content=body)


@app.get("/{city}/districts")
def city_districts(city: str) -> List[str]:
    entries = get_city(_require_catalog(), city)
    if not entries:
        raise HTTPException(status_code=404, detail="Not Found")
    return [e.district for e in entries]


@app.get("/{city}")
def city_or_district(city: str):
    catalog = _require_catalog()
    units = city_units(catalog, city)
    if units is not None:
        # echo the name as requested
        return to_city_units(city, units)
    entry = get_district(catalog, city)
    if entry is None:
        raise HTTPException(status_code=404, detail="Not Found")
    return to_district_units(entry)


# -----------------------
# CLI convenience
# -----------------------

def search_single_query(query: str, catalog_path: Optional[str] = None) -> Tuple[int, object]:
    catalog = load_catalog(catalog_path) if catalog_path else _require_catalog()
    return run_search(query, catalog)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="geosearch")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=config.HOST)
    serve.add_argument("--port", type=int, default=config.PORT)

    one = sub.add_parser("search", help="Run one search and print the JSON response")
    one.add_argument("query")
    one.add_argument("--catalog", default=None, help="Path to a locations CSV")

    args = ap.parse_args(argv)

    if args.command == "serve":
        import uvicorn

        logger.info("API listening at http://{}:{}", args.host, args.port)
        uvicorn.run(app, host=args.host, port=args.port)
        return 0

    code, body = search_single_query(args.query, args.catalog)
    print(json.dumps(body, ensure_ascii=False, indent=2))
    return 0 if code != 400 else 2


if __name__ == "__main__":
    sys.exit(main())

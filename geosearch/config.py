from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "locations.csv"
CATALOG_PATH = Path(os.getenv("CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))


# ---------------------------
# Server
# ---------------------------

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))

CORS_ALLOW_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]


# ---------------------------
# Search policy
# ---------------------------

MIN_QUERY_LENGTH = int(os.getenv("MIN_QUERY_LENGTH", "3"))
MAX_QUERY_CHARS = int(os.getenv("MAX_QUERY_CHARS", "200"))  # input size cap

# District hits are scored against the city's length, as the legacy API did.
SEARCH_DISTRICT_RATE_USES_CITY_LENGTH = _env_flag("SEARCH_DISTRICT_RATE_USES_CITY_LENGTH", True)

# Blank tokens from doubled/edge spaces match every field when kept.
SEARCH_KEEP_EMPTY_TOKENS = _env_flag("SEARCH_KEEP_EMPTY_TOKENS", False)

BAD_QUERY_MESSAGE = f"Query must be at least {MIN_QUERY_LENGTH} characters long"


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class CatalogEntry(BaseModel):
    """
    A single catalog record. Frozen: the catalog is shared read-only
    between requests.
    """

    model_config = ConfigDict(frozen=True)

    city: str = Field(min_length=1)
    district: str = Field(min_length=1)
    units: int = Field(ge=0)


class SearchResult(BaseModel):
    """
    One ranked hit of GET /search/{query}.
    """

    found: bool
    rate: float
    name: Optional[str]
    city: Optional[str]
    type: str


class NoMatchResponse(BaseModel):
    """
    Placeholder body returned with 404 when a search matches nothing.
    """

    found: bool = False
    rate: Optional[float] = None
    name: Optional[str] = None
    city: Optional[str] = None
    type: Optional[str] = None


class CityUnits(BaseModel):
    city: str
    units: int = Field(ge=0)


class DistrictUnits(BaseModel):
    city: str
    district: str
    units: int = Field(ge=0)


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str

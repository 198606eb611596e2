from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from . import config
from .config import CatalogEntry
from .normalize import fold


# ---------------------------
# Column detection / standardization
# ---------------------------

# Exports of the location list come with English or Turkish headers.
COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "city": [
        "city",
        "City",
        "il",
        "İl",
        "province",
        "Province",
    ],
    "district": [
        "district",
        "District",
        "ilce",
        "ilçe",
        "İlçe",
        "county",
        "County",
    ],
    "units": [
        "units",
        "Units",
        "unit_count",
        "count",
        "Count",
    ],
}

REQUIRED_COLUMNS = ["city", "district"]


def _standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename columns from the raw file to the canonical schema
    (city, district, units).
    """
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            # Try exact, then case-insensitive
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.info("Standardizing columns with map: {}", col_map)
    df_std = df.rename(columns=col_map)

    missing = [c for c in REQUIRED_COLUMNS if c not in df_std.columns]
    if missing:
        raise ValueError(f"Catalog is missing required columns: {missing}")
    return df_std


# ---------------------------
# Field parsing helpers
# ---------------------------

def parse_units(value) -> int:
    """
    Coerce a units cell into an int >= 0.

    - NaN / None / unparsable -> 0
    - "1,250" -> 1250
    - negative numbers clamp to 0
    """
    if value is None:
        return 0
    if isinstance(value, (int, np.integer)):
        return max(0, int(value))
    if isinstance(value, (float, np.floating)):
        return 0 if np.isnan(value) else max(0, int(value))
    s = str(value).strip().replace(",", "").replace("_", "")
    if not s:
        return 0
    try:
        return max(0, int(float(s)))
    except ValueError:
        return 0


def normalize_catalog_df(df_raw: pd.DataFrame) -> pd.DataFrame:
    """
    Clean a raw location frame into the canonical schema:

    - city (str, non-empty)
    - district (str, non-empty)
    - units (int, >= 0)

    Row order is preserved; it decides tie order in search results.
    """
    logger.info("Normalizing catalog dataframe with {} raw rows", len(df_raw))
    df = _standardize_columns(df_raw.copy())

    for col in REQUIRED_COLUMNS:
        df[col] = df[col].fillna("").astype(str).str.strip()

    empty = (df["city"] == "") | (df["district"] == "")
    if empty.any():
        logger.warning("Dropping {} catalog rows with empty city or district", int(empty.sum()))
        df = df[~empty].copy()

    if "units" in df.columns:
        parsed = df["units"].apply(parse_units)
        bad = df["units"].notna() & (parsed.astype(str) != df["units"].astype(str).str.strip())
        if bad.any():
            logger.warning("Coerced {} non-canonical units values", int(bad.sum()))
        df["units"] = parsed
    else:
        logger.warning("Catalog has no units column; defaulting to 0")
        df["units"] = 0

    df_out = df[["city", "district", "units"]].reset_index(drop=True)
    logger.info("Catalog normalization complete. Final rows: {}", len(df_out))
    return df_out


# ---------------------------
# IO helpers
# ---------------------------

def entries_from_df(df: pd.DataFrame) -> Tuple[CatalogEntry, ...]:
    return tuple(
        CatalogEntry(city=city, district=district, units=int(units))
        for city, district, units in df[["city", "district", "units"]].itertuples(index=False, name=None)
    )


def load_catalog(path: Optional[Path] = None) -> Tuple[CatalogEntry, ...]:
    """
    Load the static location list into an immutable tuple of entries.

    Defaults to config.CATALOG_PATH (data/locations.csv).
    """
    path = Path(path) if path is not None else config.CATALOG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    logger.info("Loading catalog from {}", path)
    df_raw = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
    entries = entries_from_df(normalize_catalog_df(df_raw))
    logger.info("Loaded catalog with {} entries", len(entries))
    return entries


# ---------------------------
# Exact-name lookups
# ---------------------------

def get_city(catalog: Sequence[CatalogEntry], city: str) -> List[CatalogEntry]:
    """All entries of a city, compared diacritic- and case-insensitively."""
    target = fold(city)
    return [e for e in catalog if fold(e.city) == target]


def get_district(catalog: Sequence[CatalogEntry], district: str) -> Optional[CatalogEntry]:
    target = fold(district)
    for e in catalog:
        if fold(e.district) == target:
            return e
    return None


def list_cities(catalog: Sequence[CatalogEntry]) -> List[str]:
    """Distinct city names in first-seen order."""
    return list(dict.fromkeys(e.city for e in catalog))


def list_districts(catalog: Sequence[CatalogEntry]) -> List[str]:
    return [e.district for e in catalog]


def city_units(catalog: Sequence[CatalogEntry], city: str) -> Optional[int]:
    """Total units across a city's districts, or None for an unknown city."""
    entries = get_city(catalog, city)
    if not entries:
        return None
    return sum(e.units for e in entries)

import pytest
from pydantic import ValidationError

from geosearch.config import CatalogEntry, HealthResponse, NoMatchResponse, SearchResult


def test_catalog_entry_is_frozen():
    entry = CatalogEntry(city="Ankara", district="Mamak", units=34)
    with pytest.raises(ValidationError):
        entry.units = 0


def test_catalog_entry_rejects_empty_names_and_negative_units():
    with pytest.raises(ValidationError):
        CatalogEntry(city="", district="Mamak", units=1)
    with pytest.raises(ValidationError):
        CatalogEntry(city="Ankara", district="Mamak", units=-1)


def test_search_result_structure():
    res = SearchResult(found=True, rate=0.5, name="Mamak", city="Ankara", type="DISTRICT")
    assert res.model_dump() == {
        "found": True,
        "rate": 0.5,
        "name": "Mamak",
        "city": "Ankara",
        "type": "DISTRICT",
    }


def test_no_match_defaults():
    assert NoMatchResponse().found is False
    assert NoMatchResponse().type is None


def test_health_response():
    health = HealthResponse(status="healthy")
    assert health.status == "healthy"

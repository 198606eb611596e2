import json

import pytest
from fastapi.testclient import TestClient

from geosearch import api
from geosearch.api import app, main
from geosearch.config import CatalogEntry


client = TestClient(app)

CATALOG = (
    CatalogEntry(city="İstanbul", district="Kadıköy", units=100),
    CatalogEntry(city="İstanbul", district="Beşiktaş", units=85),
    CatalogEntry(city="Ankara", district="Çankaya", units=88),
    CatalogEntry(city="Ankara", district="Mamak", units=34),
)


@pytest.fixture(autouse=True)
def small_catalog(monkeypatch):
    # Monkeypatch the loaded catalog so we don't read the bundled file
    monkeypatch.setattr(api, "_catalog", CATALOG)


def test_health_endpoint():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


def test_root_returns_full_catalog():
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 4
    assert data[0] == {"city": "İstanbul", "district": "Kadıköy", "units": 100}


def test_cities_are_distinct():
    resp = client.get("/cities")
    assert resp.json() == ["İstanbul", "Ankara"]


def test_districts():
    resp = client.get("/districts")
    assert resp.json() == ["Kadıköy", "Beşiktaş", "Çankaya", "Mamak"]


def test_search_ok():
    resp = client.get("/search/kadikoy")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 1
    assert data[0]["name"] == "Kadıköy"
    assert data[0]["city"] == "İstanbul"
    assert data[0]["type"] == "DISTRICT"
    assert data[0]["found"] is True
    assert data[0]["rate"] == pytest.approx(1.0)


def test_search_with_two_words():
    resp = client.get("/search/istanbul%20kadikoy")
    assert resp.status_code == 200
    names = [r["name"] for r in resp.json()]
    assert set(names) == {"İstanbul", "Kadıköy"}


def test_search_short_query_is_400():
    resp = client.get("/search/ka")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Query must be at least 3 characters long"}


def test_search_no_match_is_404_placeholder():
    resp = client.get("/search/zzzzz")
    assert resp.status_code == 404
    assert resp.json() == {"found": False, "rate": None, "name": None, "city": None, "type": None}


def test_search_route_wins_over_city_districts():
    # '/search/districts' must reach search, not the city lookup
    resp = client.get("/search/districts")
    assert resp.status_code == 404
    assert resp.json()["found"] is False


def test_city_units():
    resp = client.get("/istanbul")
    assert resp.status_code == 200
    # name echoed as requested
    assert resp.json() == {"city": "istanbul", "units": 185}


def test_district_fallback():
    resp = client.get("/cankaya")
    assert resp.status_code == 200
    assert resp.json() == {"city": "Ankara", "district": "Çankaya", "units": 88}


def test_unknown_name_is_404():
    resp = client.get("/nowhere")
    assert resp.status_code == 404


def test_city_districts():
    resp = client.get("/ankara/districts")
    assert resp.status_code == 200
    assert resp.json() == ["Çankaya", "Mamak"]

    assert client.get("/nowhere/districts").status_code == 404


def test_catalog_unavailable_is_500(monkeypatch):
    def broken():
        raise FileNotFoundError("missing.csv")

    monkeypatch.setattr(api, "_catalog", None)
    monkeypatch.setattr(api, "get_catalog", broken)

    resp = client.get("/cities")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Catalog not loaded"}


def test_long_query_is_truncated(monkeypatch):
    monkeypatch.setattr(api.config, "MAX_QUERY_CHARS", 7)
    resp = client.get("/search/kadikoyxxxxxxxx")
    assert resp.status_code == 200
    assert resp.json()[0]["name"] == "Kadıköy"
    # scored against 'kadikoy', not the full 15-char path segment
    assert resp.json()[0]["rate"] == pytest.approx(1.0)


def test_cli_search(tmp_path, capsys):
    path = tmp_path / "locations.csv"
    path.write_text("city,district,units\nİstanbul,Kadıköy,100\n", encoding="utf-8")

    assert main(["search", "kadikoy", "--catalog", str(path)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out[0]["name"] == "Kadıköy"

    assert main(["search", "ka", "--catalog", str(path)]) == 2

import httpx
import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

from libtech_directory.api.dependencies import get_loader
from libtech_directory.catalog.loader import DatasetLoader
from libtech_directory.main import app
from libtech_directory.state import app_state

from samples import SCENARIO_CSV


@pytest.fixture
def client(installed_sample):
    # No lifespan: the dataset is installed by the fixture, not downloaded
    yield TestClient(app)
    app.dependency_overrides = {}


def use_transport(handler):
    loader = DatasetLoader(
        app_state,
        url="https://sheets.example.org/pub?output=csv",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    app.dependency_overrides[get_loader] = lambda: loader


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["records"] == 4


def test_list_records_first_page(client):
    resp = client.get("/api/records")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_items"] == 4
    assert data["total_pages"] == 1
    assert [item["identifier"] for item in data["items"]] == [
        "alpha",
        "beta",
        "cafe-accessibilite",
        "ecran-braille",
    ]


def test_list_records_with_facets_and_search(client):
    resp = client.get(
        "/api/records",
        params=[("facet", "Besoin:Vision"), ("facet", "Prix:Gratuit"), ("q", "fr")],
    )
    data = resp.json()
    # OR across facets gives all four; the search keeps those mentioning "fr"
    assert [item["name"] for item in data["items"]] == [
        "Alpha",
        "Beta",
        "Café Accessibilité",
        "écran Braille",
    ]

    resp = client.get("/api/records", params={"facet": "Besoin:Vision", "q": "robot"})
    assert [item["name"] for item in resp.json()["items"]] == ["Beta"]


def test_unknown_facet_is_rejected(client):
    resp = client.get("/api/records", params={"facet": "Couleur:Rouge"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "unknown_facet"

    resp = client.get("/api/records", params={"facet": "Besoin"})
    assert resp.status_code == 400


def test_blank_facet_token_does_not_empty_the_listing(client):
    resp = client.get("/api/records", params={"facet": "Besoin:"})
    assert resp.status_code == 200
    assert resp.json()["total_items"] == 4


def test_out_of_range_page_is_clamped(client):
    resp = client.get("/api/records", params={"page": 9})
    assert resp.json()["page"] == 1


def test_record_detail(client):
    resp = client.get("/api/records/cafe-accessibilite")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Café Accessibilité"
    assert data["fields"]["langs"] == "Français, Anglais"
    assert data["fields"]["website"] == "https://cafe.example.org"
    assert data["cells"]["Prix"] == "Gratuit"


def test_record_detail_not_found(client):
    resp = client.get("/api/records/nope")
    assert resp.status_code == 404


def test_facets(client):
    data = client.get("/api/facets").json()
    assert [f["label"] for f in data][:2] == ["Besoin", "Technologie"]
    besoin = next(f for f in data if f["label"] == "Besoin")
    assert besoin["display_name"] == "Need"
    assert besoin["tokens"] == ["Mobilité", "Vision"]


def test_dataset_info(client):
    data = client.get("/api/dataset").json()
    assert data["record_count"] == 4
    assert data["generation"] == 1
    assert data["last_error"] is None
    assert "Tranche d'âge" in data["headers"]


def test_reload_replaces_dataset(client):
    use_transport(lambda request: httpx.Response(200, text=SCENARIO_CSV))

    resp = client.post("/api/reload")

    assert resp.status_code == 200
    assert resp.json() == {"status": "reloaded", "record_count": 3, "generation": 2}
    assert client.get("/api/records/gamma").status_code == 200
    assert client.get("/api/records/cafe-accessibilite").status_code == 404


def test_failed_reload_keeps_serving_previous_data(client):
    use_transport(lambda request: httpx.Response(500))

    resp = client.post("/api/reload")

    assert resp.status_code == 502
    assert resp.json()["error"] == "dataset_load_failed"
    assert client.get("/api/records").json()["total_items"] == 4
    assert client.get("/api/dataset").json()["last_error"] is not None


@pytest.mark.asyncio
async def test_locale_switches_columns_without_reload():
    from libtech_directory.catalog.loader import parse_csv

    app_state.reset()
    generation = app_state.begin_load()
    app_state.install(parse_csv("Nom_fr,Nom_en\nLoupe,Magnifier\n", "fr"), generation)
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            fr = await ac.get("/api/records", params={"lang": "fr"})
            en = await ac.get("/api/records", params={"lang": "en"})
        assert fr.json()["items"][0]["name"] == "Loupe"
        assert en.json()["items"][0]["name"] == "Magnifier"
        assert fr.json()["items"][0]["identifier"] == en.json()["items"][0]["identifier"] == "loupe"
    finally:
        app_state.reset()

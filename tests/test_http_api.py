import json

import pytest
from fastapi.testclient import TestClient

from vinscan.api import http_api
from vinscan.core.adapter import VehicleAIAdapter
from vinscan.llm.provider_config import AdapterConfig

from stub_oracle import StubOracle


@pytest.fixture
def oracle():
    return StubOracle()


@pytest.fixture
def client(config, oracle):
    adapter = VehicleAIAdapter(config, oracle=oracle)
    http_api.app.dependency_overrides[http_api.get_adapter] = lambda: adapter
    yield TestClient(http_api.app)
    http_api.app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_decode_vin(client, oracle):
    oracle.text = json.dumps({"brand": "Audi", "model": "A1", "fuelType": "Essence"})
    response = client.post("/api/vin/decode", json={"vin": "WAUZZZ8X0BB000001"})
    assert response.status_code == 200
    assert response.json() == {"brand": "Audi", "model": "A1", "fuelType": "Essence"}


def test_decode_vin_empty_reply(client, oracle):
    assert client.post("/api/vin/decode", json={"vin": "X"}).json() == {}


def test_scan_normalizes_and_validates_image(client, oracle, png_data_uri):
    oracle.text = json.dumps({"vin": "wauzzz8x0bb000001", "brand": "audi", "model": "a1"})

    response = client.post("/api/scan", json={"image": png_data_uri, "mode": "carte grise"})

    assert response.status_code == 200
    body = response.json()
    assert body["vin"] == "WAUZZZ8X0BB000001"
    assert body["licensePlate"] == ""
    assert oracle.last.image.mime_type == "image/png"


def test_scan_empty_reply_maps_to_502(client, png_data_uri):
    response = client.post("/api/scan", json={"image": png_data_uri})
    assert response.status_code == 502
    assert response.json() == {"error": "IA_EMPTY_RESPONSE"}


def test_scan_rejects_non_image(client, oracle):
    response = client.post("/api/scan", json={"image": "data:image/png;base64,aGVsbG8="})
    assert response.status_code == 400
    assert oracle.requests == []


def test_scan_rejects_unknown_mode(client, png_data_uri):
    response = client.post("/api/scan", json={"image": png_data_uri, "mode": "radar"})
    assert response.status_code == 422


def test_refine(client, oracle, png_data_uri):
    oracle.text = json.dumps({"motorization": "2.0 TDI"})
    response = client.post("/api/scan/refine", json={"image": png_data_uri, "brand": "AUDI"})
    assert response.json() == {"motorization": "2.0 TDI"}


def test_report_fallback(client):
    response = client.post("/api/vin/report", json={"vin": "WVWZZZ1KZAW000001"})
    assert response.json() == {"report": "Impossible de générer le rapport pour ce VIN."}


def test_chat_forwards_history(client, oracle):
    oracle.text = "Vidange tous les 10 000 km."
    response = client.post(
        "/api/chat",
        json={
            "history": [{"role": "user", "text": "Bonjour"}, {"role": "model", "text": "Salut"}],
            "question": "Et la vidange ?",
        },
    )
    assert response.json() == {"answer": "Vidange tous les 10 000 km."}
    assert [turn.role for turn in oracle.last.history] == ["user", "model"]


def test_chat_rejects_unknown_role(client):
    response = client.post("/api/chat", json={"history": [{"role": "system", "text": "x"}], "question": "?"})
    assert response.status_code == 422


def test_valuation(client, oracle):
    oracle.text = json.dumps({"marketValueMin": 150000, "marketValueMax": 170000, "marketValueJustification": "ok"})
    response = client.post(
        "/api/valuation",
        json={"vehicle": {"brand": "TOYOTA", "model": "COROLLA", "yearOfManufacture": "2020"}},
    )
    assert response.json()["marketValueMin"] == 150000
    assert "- Année de fabrication: 2020" in oracle.last.system_instruction


def test_valuation_empty_reply_maps_to_502(client):
    response = client.post("/api/valuation", json={"vehicle": {"brand": "TOYOTA"}})
    assert response.status_code == 502
    assert response.json() == {"error": "IA_ESTIMATION_FAILED"}


def test_missing_api_key_maps_to_500(monkeypatch):
    monkeypatch.setattr(http_api, "create_adapter", lambda: VehicleAIAdapter(AdapterConfig(api_key=None)))
    http_api.get_adapter.cache_clear()
    try:
        response = TestClient(http_api.app).post("/api/vin/decode", json={"vin": "X"})
    finally:
        http_api.get_adapter.cache_clear()
    assert response.status_code == 500
    assert response.json() == {"error": "CONFIGURATION_ERROR"}

"""
Tests for the beacon HTTP endpoints, run against a fake query backend.
"""
from app.core.config import settings
from app.core.predicate import Column, Operator


def test_about(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["apiVersion"] == settings.BEACON_API_VERSION
    assert data["dataset"] == settings.VARIANTS_DATASET
    assert set(data["organization"]) == {"id", "name"}


def test_query_get_exists(client, executor):
    response = client.get("/query", params={
        "referenceName": "1", "referenceBases": "A", "alternateBases": "G",
        "start": "100", "end": "101",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["exists"] is True
    assert data["error"] is None
    assert data["apiVersion"] == settings.BEACON_API_VERSION
    assert data["alleleRequest"]["start"] == 100

    predicate, table_id, _ = executor.calls[0]
    assert table_id == settings.VARIANTS_DATASET
    assert [(k.column, k.operator, k.value) for k in predicate.constraints] == [
        (Column.REFERENCE_NAME, Operator.EQ, "1"),
        (Column.REFERENCE_BASES, Operator.EQ, "A"),
        (Column.ALTERNATE_BASES, Operator.CONTAINS, "G"),
        (Column.START, Operator.EQ, 100),
        (Column.END, Operator.EQ, 101),
    ]


def test_query_not_found(client, executor):
    executor.result = 0
    response = client.get("/query", params={"referenceName": "1", "referenceBases": "A", "start": "5"})
    assert response.status_code == 200
    assert response.json()["exists"] is False


def test_query_post_json(client, executor):
    response = client.post("/query", json={
        "referenceName": "1", "referenceBases": "A",
        "startMin": 10, "startMax": 20, "endMin": 30, "endMax": 40,
    })
    assert response.status_code == 200
    assert response.json()["exists"] is True
    predicate = executor.calls[0][0]
    assert len(predicate.constraints) == 6


def test_blank_coordinates_are_absent(client, executor):
    response = client.get("/query", params={
        "referenceName": "1", "referenceBases": "A", "start": "", "startMin": "",
    })
    assert response.status_code == 200
    assert len(executor.calls[0][0].constraints) == 2


def test_validation_error_envelope(client, executor):
    response = client.get("/query", params={
        "referenceName": "3", "referenceBases": "ACGT", "alternateBases": "act",
    })
    assert response.status_code == 400
    data = response.json()
    assert data["exists"] is None
    assert data["error"]["errorCode"] == "400"
    assert data["error"]["errorMessage"].startswith("validating input: invalid value for alternateBases")
    assert executor.calls == []


def test_conflicting_coordinates_rejected(client, executor):
    response = client.post("/query", json={
        "referenceName": "2", "referenceBases": "N", "start": 50,
        "startMin": 10, "startMax": 20, "endMin": 30, "endMax": 40,
    })
    assert response.status_code == 400
    assert "precise" in response.json()["error"]["errorMessage"]


def test_non_integer_coordinate(client):
    response = client.get("/query", params={"referenceName": "1", "referenceBases": "A", "start": "abc"})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("parsing input")


def test_coordinate_outside_int64(client):
    response = client.post("/query", json={"referenceName": "1", "referenceBases": "A", "start": 2 ** 63})
    assert response.status_code == 400


def test_invalid_json_body(client):
    response = client.post("/query", content="{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "decoding request body" in response.json()["detail"]


def test_backend_failure(client, executor):
    executor.error = RuntimeError("table not found")
    response = client.get("/query", params={"referenceName": "1", "referenceBases": "A"})
    assert response.status_code == 500
    error = response.json()["error"]
    assert error["errorCode"] == "500"
    assert error["errorMessage"] == "computing result: table not found"


def test_missing_dataset(client, monkeypatch):
    monkeypatch.setattr(settings, "VARIANTS_DATASET", "")
    response = client.get("/query", params={"referenceName": "1", "referenceBases": "A"})
    assert response.status_code == 500
    assert response.json()["detail"].startswith("validating server configuration")


def test_unsupported_method(client):
    response = client.put("/query", json={})
    assert response.status_code == 405


def test_cors_echoes_origin(client):
    response = client.get("/", headers={"Origin": "https://example.org"})
    assert response.headers["access-control-allow-origin"] == "https://example.org"


def test_legacy_query_returns_xml(client, executor, legacy_mode):
    response = client.get("/query", params={"chromosome": "1", "allele": "A", "coordinate": "99"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.text == "<BEACONResponse>\n  <exists>true</exists>\n</BEACONResponse>"

    predicate = executor.calls[0][0]
    assert [(k.column, k.operator, k.value) for k in predicate.constraints][2:] == [
        (Column.START, Operator.LE, 99),
        (Column.END, Operator.GT, 99),
    ]


def test_legacy_query_post(client, executor, legacy_mode):
    executor.result = 0
    response = client.post("/query", json={"chromosome": "1", "allele": "A", "coordinate": 99})
    assert response.status_code == 200
    assert "<exists>false</exists>" in response.text


def test_legacy_missing_coordinate(client, executor, legacy_mode):
    response = client.get("/query", params={"chromosome": "1", "allele": "A"})
    assert response.status_code == 400
    assert response.json()["detail"] == "validating input: missing coordinate"
    assert executor.calls == []


def test_precise_with_stray_range_field_rejected(client, executor):
    response = client.get("/query", params={
        "referenceName": "1", "referenceBases": "A", "start": "1", "end": "2", "startMin": "500",
    })
    assert response.status_code == 400
    assert response.json()["error"]["errorCode"] == "400"
    assert executor.calls == []


def test_malformed_beacon_file(client, executor, monkeypatch, tmp_path):
    path = tmp_path / "beacon.json"
    path.write_text("{not json")
    monkeypatch.setattr(settings, "BEACON_INFO_FILE", str(path))

    response = client.get("/query", params={"referenceName": "1", "referenceBases": "A"})
    assert response.status_code == 500
    assert response.json()["detail"].startswith("validating server configuration: reading beacon info")
    assert executor.calls == []

    response = client.get("/")
    assert response.status_code == 500
    assert response.json()["detail"].startswith("validating server configuration")


def test_about_without_dataset(client, monkeypatch):
    monkeypatch.setattr(settings, "VARIANTS_DATASET", "")
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["dataset"] == ""


def test_legacy_about_is_xml(client, legacy_mode):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.text.startswith("<BEACONInfo>")
    assert f"<apiVersion>{settings.BEACON_API_VERSION}</apiVersion>" in response.text
    assert f"<dataset>{settings.VARIANTS_DATASET}</dataset>" in response.text
    assert "<organization>" in response.text

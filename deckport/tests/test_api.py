"""Tests for the HTTP API."""

import base64
import hashlib

from fastapi.testclient import TestClient


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client: TestClient) -> None:
        """Test the unprefixed health check."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["app"] == "deckport"

    def test_prefixed_health(self, client: TestClient) -> None:
        """Test the health check under the API prefix."""
        assert client.get("/api/health").status_code == 200


class TestExportEndpoint:
    """Tests for POST /api/export."""

    def test_export_document(self, client: TestClient, sample_document: dict) -> None:
        """Test a full export of the document's selection."""
        response = client.post("/api/export", json={"document": sample_document})
        assert response.status_code == 200

        message = response.json()
        assert message["type"] == "export-data"
        assert message["aspect_ratio"] == {"width": 960, "height": 540}
        assert [doc["name"] for doc in message["data"]] == ["Title slide", "Agenda"]

        title, agenda = message["data"]
        assert [element["kind"] for element in title["elements"]] == ["shape", "text", "image", "line"]
        hero = title["elements"][2]
        assert hero["node_id"] == "1:4"
        assert hero["source_image_hash"] == "img-hero"
        assert isinstance(hero["image_bytes"], str)

        # Stars rasterize; vectors have no paintable geometry and fall back
        assert [(element["node_id"], element["kind"]) for element in agenda["elements"]] == [
            ("2:2", "image"),
            ("2:3", "shape"),
        ]
        assert agenda["elements"][1]["shape_type"] == "vector"

    def test_image_token_matches_bytes(self, client: TestClient, sample_document: dict) -> None:
        """Test the token is the hash of the delivered bytes."""
        response = client.post("/api/export", json={"document": sample_document, "selection": ["2:1"]})
        star = response.json()["data"][0]["elements"][0]
        data = base64.urlsafe_b64decode(star["image_bytes"])
        assert data.startswith(b"\x89PNG")
        assert star["image_token"] == hashlib.sha256(data).hexdigest()

    def test_explicit_selection(self, client: TestClient, sample_document: dict) -> None:
        """Test an explicit selection overrides the document's."""
        response = client.post("/api/export", json={"document": sample_document, "selection": ["2:1"]})
        assert [doc["name"] for doc in response.json()["data"]] == ["Agenda"]

    def test_empty_selection(self, client: TestClient, sample_document: dict) -> None:
        """Test an empty selection is a client error."""
        response = client.post("/api/export", json={"document": sample_document, "selection": []})
        assert response.status_code == 400
        assert response.json()["detail"] == "Select a frame to export first"

    def test_no_frame_selected(self, client: TestClient, sample_document: dict) -> None:
        """Test selecting only leaf nodes is a client error."""
        response = client.post("/api/export", json={"document": sample_document, "selection": ["1:9"]})
        assert response.status_code == 400
        assert response.json()["detail"] == "Select at least one frame to export"

    def test_invalid_document(self, client: TestClient) -> None:
        """Test malformed documents are rejected by validation."""
        response = client.post(
            "/api/export",
            json={"document": {"pages": [{"children": [{"type": "FRAME", "width": -5}]}]}},
        )
        assert response.status_code == 422

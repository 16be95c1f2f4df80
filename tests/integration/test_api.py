"""Integration tests for the HTTP API."""

import json

import fitz  # PyMuPDF

from formfill.config import get_settings


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self, client):
        """Test health endpoint returns healthy status."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "environment" in data


class TestFieldsEndpoint:
    """Tests for the form layout endpoint."""

    def test_list_fields(self, client):
        response = client.get("/api/v1/fields")

        assert response.status_code == 200
        data = response.json()
        fields = {f["id"]: f for f in data["fields"]}
        assert fields["name_bn"]["pdf_field_id"] == "Name_Bangla"
        assert fields["name_bn"]["rect"] == {"x": 193, "y": 584, "w": 364, "h": 11}
        assert set(data["photo_box"]) == {"x", "y", "w", "h"}
        assert set(data["signature_box"]) == {"x", "y", "w", "h"}


class TestTemplateEndpoint:
    """Tests for downloading the blank form."""

    def test_download(self, client, template_bytes):
        response = client.get("/api/v1/template")

        assert response.status_code == 200
        assert response.content == template_bytes
        assert "HSTU_Karate_Dojo_Form_Blank.pdf" in response.headers["content-disposition"]

    def test_missing_template(self, client, template_file):
        template_file.unlink()

        response = client.get("/api/v1/template")

        assert response.status_code == 503


class TestValidateEndpoint:
    """Tests for the image validation endpoint."""

    def test_valid_photo(self, client, image_factory):
        response = client.post(
            "/api/v1/validate",
            files={"file": ("photo.jpg", image_factory((300, 360), "JPEG"), "image/jpeg")},
            data={"profile": "photo"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["dimensions"] == {"width": 300, "height": 360}

    def test_small_photo(self, client, image_factory):
        response = client.post(
            "/api/v1/validate",
            files={"file": ("photo.jpg", image_factory((100, 100), "JPEG"), "image/jpeg")},
            data={"profile": "photo"},
        )

        data = response.json()
        assert data["valid"] is False
        assert "too small" in data["errors"][0]

    def test_corrupted_image(self, client):
        response = client.post(
            "/api/v1/validate",
            files={"file": ("photo.png", b"garbage", "image/png")},
            data={"profile": "signature"},
        )

        data = response.json()
        assert data["valid"] is False
        assert data["dimensions"] is None

    def test_unknown_profile(self, client, image_factory):
        response = client.post(
            "/api/v1/validate",
            files={"file": ("photo.jpg", image_factory((300, 360), "JPEG"), "image/jpeg")},
            data={"profile": "passport"},
        )

        assert response.status_code == 400

    def test_rejects_no_file(self, client):
        response = client.post("/api/v1/validate")

        assert response.status_code == 422


class TestFillEndpoint:
    """Tests for the fill endpoint."""

    def test_fill_text(self, client):
        response = client.post(
            "/api/v1/fill",
            data={"fields": json.dumps({"name_bn": "করাতে", "name_en": "Rahim Uddin"})},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["x-formfill-skipped"] == "0"
        with fitz.open(stream=response.content, filetype="pdf") as doc:
            assert len(doc[0].get_images()) == 2
            assert list(doc[0].widgets()) == []

    def test_fill_with_images(self, client, image_factory):
        response = client.post(
            "/api/v1/fill",
            data={"fields": json.dumps({"name_en": "Rahim"})},
            files={
                "photo": ("photo.jpg", image_factory((300, 360), "JPEG"), "image/jpeg"),
                "signature": ("sig.png", image_factory((400, 150), "PNG", "RGBA"), "image/png"),
            },
        )

        assert response.status_code == 200
        with fitz.open(stream=response.content, filetype="pdf") as doc:
            assert len(doc[0].get_images()) == 3

    def test_non_string_values_coerced(self, client):
        response = client.post("/api/v1/fill", data={"fields": json.dumps({"student_id": 1902045})})

        assert response.status_code == 200

    def test_invalid_json(self, client):
        response = client.post("/api/v1/fill", data={"fields": "{not json"})

        assert response.status_code == 400
        assert "JSON object" in response.json()["detail"]

    def test_json_array_rejected(self, client):
        response = client.post("/api/v1/fill", data={"fields": "[1, 2]"})

        assert response.status_code == 400

    def test_invalid_photo_rejected_before_fill(self, client, image_factory):
        response = client.post(
            "/api/v1/fill",
            files={"photo": ("photo.jpg", image_factory((100, 100), "JPEG"), "image/jpeg")},
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid photo: Image is too small")

    def test_template_unavailable(self, client, template_file):
        template_file.unlink()

        response = client.post("/api/v1/fill", data={"fields": "{}"})

        assert response.status_code == 503

    def test_output_filename(self, client):
        response = client.post("/api/v1/fill", data={"fields": "{}"})

        assert get_settings().output_filename in response.headers["content-disposition"]


class TestDraftEndpoints:
    """Tests for saving and restoring drafts."""

    def test_save_load_clear(self, client, image_factory):
        values = {"name_bn": "করাতে", "blood_group": "O+"}

        response = client.put(
            "/api/v1/drafts",
            data={"fields": json.dumps(values)},
            files={"photo": ("photo.png", image_factory((300, 360), "PNG"), "image/png")},
        )
        assert response.status_code == 200
        assert response.json()["values"] == values

        loaded = client.get("/api/v1/drafts").json()
        assert loaded["values"] == values
        assert loaded["photo"].startswith("data:image/png;base64,")
        assert loaded["signature"] is None

        assert client.delete("/api/v1/drafts").status_code == 204
        assert client.get("/api/v1/drafts").json() == {"values": {}, "photo": None, "signature": None}


class TestRootEndpoint:
    """Tests for the root endpoint."""

    def test_root_returns_info(self, client):
        """Test root endpoint returns API info."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "version" in data
        assert "docs" in data
        assert data["health"] == "/api/v1/health"

    def test_no_static_mount(self, client):
        assert client.get("/static/index.html").status_code == 404

import time

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from intensity_server import main as main_module
from intensity_server.config import Settings
from intensity_server.core import intensity as intensity_module
from intensity_server.main import create_app

from conftest import encode, noise, solid

URL = "/calculate-intensity"


def _upload(client, data, filename="image.png", content_type="image/png", field="image"):
    return client.post(URL, files={field: (filename, data, content_type)})


def test_calculate_intensity_success(client, png_bytes):
    response = _upload(client, png_bytes)
    assert response.status_code == 200
    assert response.json() == {
        "average_intensity": 150.0,
        "message": "Average intensity calculated: 150.00",
    }


def test_calculate_intensity_rounds_to_two_decimals(client):
    image = Image.new("RGB", (2, 1))
    image.putpixel((0, 0), (0, 0, 1))
    response = _upload(client, encode(image, "PNG"))
    assert response.status_code == 200
    body = response.json()
    assert body["average_intensity"] == 0.17
    assert body["message"] == "Average intensity calculated: 0.17"


@pytest.mark.parametrize("color, expected", [((0, 0, 0), 0.0), ((255, 255, 255), 255.0)])
def test_calculate_intensity_solid_colors(client, color, expected):
    response = _upload(client, encode(solid(color, size=(20, 10)), "BMP"), "img.bmp", "image/bmp")
    assert response.status_code == 200
    assert response.json()["average_intensity"] == expected


def test_missing_image_field(client, png_bytes):
    response = _upload(client, png_bytes, field="file")
    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"status", "error_code", "message"}
    assert body["status"] == "error"
    assert body["error_code"] == "MISSING_INPUT"
    assert body["message"]


def test_request_without_body(client):
    response = client.post(URL)
    assert response.status_code == 400
    assert response.json()["error_code"] == "MISSING_INPUT"


def test_empty_upload(client):
    response = _upload(client, b"")
    assert response.status_code == 400
    assert response.json()["error_code"] == "MISSING_INPUT"


def test_unsupported_format(client):
    response = _upload(client, b"just some text, no image here", "notes.txt", "text/plain")
    assert response.status_code == 422
    assert response.json()["error_code"] == "UNSUPPORTED_FORMAT"


def test_truncated_image(client):
    data = encode(noise(), "PNG")
    response = _upload(client, data[: len(data) // 2])
    assert response.status_code == 422
    assert response.json()["error_code"] == "CORRUPT_IMAGE"


def test_payload_too_large():
    client = TestClient(create_app(Settings(max_upload_bytes=100)))
    response = _upload(client, encode(noise(), "PNG"))
    assert response.status_code == 413
    assert response.json()["error_code"] == "PAYLOAD_TOO_LARGE"


def test_upload_at_size_limit_is_accepted(png_bytes):
    client = TestClient(create_app(Settings(max_upload_bytes=len(png_bytes))))
    assert _upload(client, png_bytes).status_code == 200


def test_internal_error_hides_details(client, monkeypatch, png_bytes):
    def broken_decode(image_bytes):
        raise RuntimeError("secret internal path /opt/decoder")

    monkeypatch.setattr(intensity_module, "decode", broken_decode)
    response = _upload(client, png_bytes)
    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "SERVER_ERROR"
    assert "/opt/decoder" not in body["message"]


def test_processing_timeout_is_server_error(monkeypatch, png_bytes):
    def slow_process(image_bytes):
        time.sleep(0.5)

    monkeypatch.setattr(main_module, "process", slow_process)
    client = TestClient(create_app(Settings(request_timeout_seconds=0.05)))
    response = _upload(client, png_bytes)
    assert response.status_code == 500
    assert response.json()["error_code"] == "SERVER_ERROR"


def test_requests_are_independent(client, png_bytes):
    assert _upload(client, b"garbage bytes").status_code == 422
    assert _upload(client, png_bytes).status_code == 200


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "OK"


def test_openapi_document(client):
    response = client.get("/api-docs/openapi.json")
    assert response.status_code == 200
    spec = response.json()
    assert spec["info"]["title"] == "Web Image Intensity Calculator API"
    assert spec["info"]["version"] == "1.0.0"
    assert "/calculate-intensity" in spec["paths"]
    assert "/health" in spec["paths"]


def test_swagger_ui(client):
    response = client.get("/swagger-ui")
    assert response.status_code == 200
    assert "swagger-ui" in response.text


def test_cors_preflight(client):
    response = client.options(
        URL,
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


def test_decompression_bomb_is_server_error(client, monkeypatch):
    # 64x64 = 4096 픽셀 > 2 * 100 이면 Pillow가 DecompressionBombError 발생
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    response = _upload(client, encode(noise(), "PNG"))
    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "SERVER_ERROR"
    assert body["message"] == "An internal error occurred while processing the image."

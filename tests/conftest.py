"""테스트용 이미지를 메모리에서 생성하는 공용 fixture"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from intensity_server.config import Settings
from intensity_server.main import create_app


def encode(image: Image.Image, fmt: str, **save_kwargs) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


def solid(color, size=(4, 3), mode="RGB") -> Image.Image:
    return Image.new(mode, size, color)


def noise(size=(64, 64), seed=0) -> Image.Image:
    rng = np.random.RandomState(seed)
    pixels = rng.randint(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    return Image.fromarray(pixels, "RGB")


@pytest.fixture
def png_bytes():
    return encode(solid((100, 150, 200), size=(1, 1)), "PNG")


@pytest.fixture
def settings():
    return Settings(max_upload_bytes=64 * 1024, request_timeout_seconds=5.0)


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))

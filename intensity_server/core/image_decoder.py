"""
업로드 이미지 디코딩 모듈
시그니처로 포맷 판별 후 Pillow로 디코딩, (H, W, 3) uint8 RGB 배열로 규격화
Alpha 채널은 합성 없이 제거, 그레이스케일은 R=G=B로 복제
"""
import io
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np
from PIL import Image

from .errors import (
    CorruptImageError,
    EmptyImageError,
    InternalProcessingError,
    UnsupportedFormatError,
)


class ImageFormat(Enum):
    """지원 컨테이너 포맷 (값 = Pillow 포맷 이름)"""
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    WEBP = "WEBP"
    BMP = "BMP"
    TIFF = "TIFF"


@dataclass(frozen=True)
class DecodedImage:
    """RGB 픽셀 버퍼. pixels는 (height, width, 3) uint8"""
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.pixels.shape != (self.height, self.width, 3) or self.pixels.dtype != np.uint8:
            raise ValueError(
                f"Pixel buffer {self.pixels.shape}/{self.pixels.dtype} does not match "
                f"{self.width}x{self.height} RGB"
            )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


# Pillow가 손상/잘린 데이터에서 던지는 예외들
_DECODE_FAILURES = (OSError, SyntaxError, ValueError, EOFError, IndexError, KeyError, struct.error)


def sniff_format(image_bytes: bytes) -> Optional[ImageFormat]:
    """
    선행 시그니처로 포맷 판별

    Args:
        image_bytes: 업로드된 이미지 바이트

    Returns:
        판별된 포맷, 지원 포맷이 아니면 None
    """
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return ImageFormat.JPEG
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return ImageFormat.PNG
    if image_bytes[:6] in (b"GIF87a", b"GIF89a"):
        return ImageFormat.GIF
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return ImageFormat.WEBP
    if image_bytes.startswith(b"BM"):
        return ImageFormat.BMP
    if image_bytes[:4] in (b"II*\x00", b"MM\x00*"):
        return ImageFormat.TIFF
    return None


def _open(image_bytes: bytes, image_format: ImageFormat) -> Image.Image:
    # 판별된 포맷 플러그인만 사용 (다른 포맷으로 재해석 방지)
    return Image.open(io.BytesIO(image_bytes), formats=[image_format.value])


def _decode_still(image_bytes: bytes, image_format: ImageFormat) -> Image.Image:
    image = _open(image_bytes, image_format)
    image.load()
    return image


def _decode_first_frame(image_bytes: bytes, image_format: ImageFormat) -> Image.Image:
    """애니메이션 GIF / 다중 페이지 TIFF는 첫 프레임만 사용"""
    image = _open(image_bytes, image_format)
    image.seek(0)
    image.load()
    return image


_DECODERS: Dict[ImageFormat, Callable[[bytes, ImageFormat], Image.Image]] = {
    ImageFormat.JPEG: _decode_still,
    ImageFormat.PNG: _decode_still,
    ImageFormat.GIF: _decode_first_frame,
    ImageFormat.WEBP: _decode_still,
    ImageFormat.BMP: _decode_still,
    ImageFormat.TIFF: _decode_first_frame,
}


def _gray_to_rgb(gray: np.ndarray) -> np.ndarray:
    return np.repeat(gray[..., np.newaxis], 3, axis=2)


def to_rgb_array(image: Image.Image) -> np.ndarray:
    """
    Pillow 이미지를 (H, W, 3) uint8 RGB 배열로 변환

    Args:
        image: 디코딩된 Pillow 이미지 (모든 모드)

    Returns:
        Alpha 제거된 RGB numpy 배열

    Raises:
        UnsupportedFormatError: RGB로 변환할 수 없는 픽셀 모드
    """
    mode = image.mode

    # 1. 팔레트 이미지는 팔레트(투명도 포함)를 풀어서 처리
    if mode in ("P", "PA"):
        image = image.convert("RGBA")
        mode = "RGBA"

    # 2. Alpha 채널 제거 (합성하지 않음)
    if mode in ("RGB", "RGBA", "RGBX"):
        rgb = np.asarray(image)[..., :3]
    elif mode == "LA":
        rgb = _gray_to_rgb(np.asarray(image)[..., 0])
    # 3. 그레이스케일 → R=G=B 복제
    elif mode in ("L", "1"):
        rgb = _gray_to_rgb(np.asarray(image.convert("L")))
    # 16/32비트 정수 그레이스케일은 8비트로 축소
    elif mode == "I" or mode.startswith("I;16"):
        wide = np.asarray(image).astype(np.float64) / 257.0
        rgb = _gray_to_rgb(np.clip(np.rint(wide), 0, 255).astype(np.uint8))
    elif mode == "F":
        rgb = _gray_to_rgb(np.clip(np.rint(np.asarray(image)), 0, 255).astype(np.uint8))
    else:
        # CMYK, YCbCr 등
        try:
            rgb = np.asarray(image.convert("RGB"))
        except ValueError as e:
            raise UnsupportedFormatError(f"Unsupported pixel mode: {mode}") from e

    return np.ascontiguousarray(rgb, dtype=np.uint8)


def decode(image_bytes: bytes) -> DecodedImage:
    """
    업로드 이미지 바이트를 RGB 픽셀 버퍼로 디코딩

    Args:
        image_bytes: 웹에서 업로드된 이미지 바이트 (JPEG, PNG, GIF, WEBP, BMP, TIFF)

    Returns:
        DecodedImage (width, height, (H, W, 3) uint8 배열)

    Raises:
        EmptyImageError: 빈 버퍼
        UnsupportedFormatError: 지원 포맷 시그니처 없음
        CorruptImageError: 시그니처는 맞지만 데이터가 잘리거나 손상됨
        InternalProcessingError: 압축 폭탄 등 자원 부족
    """
    if not image_bytes:
        raise EmptyImageError()

    image_format = sniff_format(image_bytes)
    if image_format is None:
        raise UnsupportedFormatError()

    try:
        image = _DECODERS[image_format](image_bytes, image_format)
    except Image.DecompressionBombError as e:
        raise InternalProcessingError() from e
    except MemoryError as e:
        raise InternalProcessingError() from e
    except _DECODE_FAILURES as e:
        raise CorruptImageError(f"{image_format.value} data is truncated or malformed.") from e

    try:
        width, height = image.size
        if width == 0 or height == 0:
            raise CorruptImageError(f"{image_format.value} image has zero width or height.")
        pixels = to_rgb_array(image)
    except MemoryError as e:
        raise InternalProcessingError() from e
    finally:
        image.close()

    return DecodedImage(width=width, height=height, pixels=pixels)

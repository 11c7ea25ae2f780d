"""
평균 밝기(intensity) 계산 모듈
픽셀 밝기 = (R + G + B) / 3, 가중치/감마 보정 없음
"""
from dataclasses import dataclass

import numpy as np

from ..utils.logger import get_logger
from .errors import ComputationError, InternalProcessingError
from .image_decoder import DecodedImage, decode

logger = get_logger("intensity-server.core")


@dataclass(frozen=True)
class IntensityResult:
    average_intensity: float  # 0.0 ~ 255.0, 전체 정밀도
    pixels_processed: int


def compute_average_intensity(image: DecodedImage) -> IntensityResult:
    """
    이미지 전체 평균 밝기 계산

    모든 채널 값을 uint64 정수로 누적한 뒤 (3 * 픽셀 수)로 한 번만 나눈다.
    픽셀별 (R+G+B)/3.0 평균과 같은 값이며 누적 순서와 무관하게 재현 가능.

    Args:
        image: 디코딩된 RGB 버퍼 (픽셀 수 >= 1)

    Returns:
        IntensityResult
    """
    pixel_count = image.pixel_count
    channel_total = int(image.pixels.sum(dtype=np.uint64))
    average = channel_total / (3 * pixel_count)
    return IntensityResult(average_intensity=average, pixels_processed=pixel_count)


def process(image_bytes: bytes) -> IntensityResult:
    """
    업로드 바이트 → 디코딩 → 평균 밝기

    Args:
        image_bytes: 업로드된 이미지 바이트

    Returns:
        IntensityResult

    Raises:
        ComputationError: 입력 오류는 그대로, 그 외 예외는 InternalProcessingError로 변환
    """
    try:
        image = decode(image_bytes)
        result = compute_average_intensity(image)
    except ComputationError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure while processing %d bytes", len(image_bytes))
        raise InternalProcessingError() from e

    logger.debug(
        "Decoded %dx%d image, %d pixels, intensity=%.4f",
        image.width, image.height, result.pixels_processed, result.average_intensity,
    )
    return result

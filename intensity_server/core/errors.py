"""
밝기 계산 파이프라인 에러 분류
모든 실패는 요청 단위로 한정되며 재시도하지 않는다.
"""
from typing import Optional

from ..utils.response import ErrorCodes


class ComputationError(Exception):
    """요청 하나의 처리 실패. HTTP 상태 코드와 에러 코드를 함께 가진다."""

    status_code: int = 500
    error_code: str = ErrorCodes.SERVER_ERROR
    default_message: str = "Image processing failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingInputError(ComputationError):
    status_code = 400
    error_code = ErrorCodes.MISSING_INPUT
    default_message = "No image uploaded. Send a non-empty file in the 'image' form field."


class PayloadTooLargeError(ComputationError):
    status_code = 413
    error_code = ErrorCodes.PAYLOAD_TOO_LARGE
    default_message = "Uploaded image exceeds the maximum allowed size."


class DecodeError(ComputationError):
    """이미지 바이트를 RGB 버퍼로 변환하지 못함"""

    status_code = 422
    error_code = ErrorCodes.CORRUPT_IMAGE
    default_message = "Image could not be decoded."


class EmptyImageError(DecodeError, MissingInputError):
    # 빈 버퍼는 손상이 아니라 입력 누락으로 보고
    status_code = 400
    error_code = ErrorCodes.MISSING_INPUT
    default_message = "Uploaded image is empty."


class UnsupportedFormatError(DecodeError):
    error_code = ErrorCodes.UNSUPPORTED_FORMAT
    default_message = (
        "Unsupported image format. Supported formats: JPEG, PNG, GIF, WEBP, BMP, TIFF."
    )


class CorruptImageError(DecodeError):
    error_code = ErrorCodes.CORRUPT_IMAGE
    default_message = "Image data is truncated or malformed."


class InternalProcessingError(ComputationError):
    """입력과 무관한 실패 (자원 부족, 디코더 내부 오류, 시간 초과). 메시지에 내부 정보 노출 금지."""

    status_code = 500
    error_code = ErrorCodes.SERVER_ERROR
    default_message = "An internal error occurred while processing the image."

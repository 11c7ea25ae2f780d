"""
Intensity Server 응답 규격 정의
"""


def create_intensity_response(average_intensity: float) -> dict:
    """
    성공 응답 생성

    Args:
        average_intensity: 전체 정밀도의 평균 밝기 값

    Returns:
        소수점 둘째 자리로 반올림된 응답 딕셔너리
    """
    return {
        "average_intensity": round(average_intensity, 2),
        "message": f"Average intensity calculated: {average_intensity:.2f}",
    }


def create_error_response(
    error_code: str,
    message: str
) -> dict:
    """
    에러 응답 생성

    Args:
        error_code: 에러 코드 (예: MISSING_INPUT, CORRUPT_IMAGE)
        message: 사용자 표시용 메시지

    Returns:
        표준화된 에러 응답 딕셔너리
    """
    return {
        "status": "error",
        "error_code": error_code,
        "message": message
    }


# 에러 코드 상수
class ErrorCodes:
    """API 에러 코드 정의"""
    MISSING_INPUT = "MISSING_INPUT"            # image 필드 없음 또는 빈 파일
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"    # 업로드 크기 초과
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"  # 지원하지 않는 이미지 포맷
    CORRUPT_IMAGE = "CORRUPT_IMAGE"            # 시그니처는 맞지만 디코딩 실패
    SERVER_ERROR = "SERVER_ERROR"              # 서버 내부 오류

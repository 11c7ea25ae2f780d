"""
Intensity Server 설정
.env 파일 → 환경 변수 순으로 읽는다.
"""
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

# 기본값
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
# 서버 부하 방지를 위한 최대 업로드 크기 (5MB)
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = int(raw)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def get_settings() -> Settings:
    """
    환경 변수에서 설정 로드

    Returns:
        Settings

    Raises:
        ValueError: 숫자 설정값이 잘못된 경우
    """
    load_dotenv()
    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    return Settings(
        host=os.getenv("HOST", DEFAULT_HOST),
        port=_positive_int("PORT", DEFAULT_PORT),
        max_upload_bytes=_positive_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        request_timeout_seconds=_positive_float(
            "REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        cors_origins=origins or ["*"],
    )

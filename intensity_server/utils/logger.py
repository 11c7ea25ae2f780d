"""
Intensity Server 로그 관리 모듈
요청 처리 결과 및 디코딩 실패 로그 기록
"""
import logging
import sys


LOGGER_NAME = "intensity-server"


def setup_logger(name: str = LOGGER_NAME, log_level: str = "INFO") -> logging.Logger:
    """
    서버 로거 초기화

    Args:
        name: 로거 이름
        log_level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR)

    Returns:
        설정된 Logger 객체

    Raises:
        ValueError: 알 수 없는 로그 레벨
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 콘솔 핸들러
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)

    # 포맷 설정
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    # 중복 핸들러 방지
    if not logger.handlers:
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """기존 로거 반환 (하위 모듈은 `intensity-server.<모듈>` 형태로 자식 로거 사용)"""
    return logging.getLogger(name)

# Intensity Server 공용 유틸리티
from .logger import setup_logger, get_logger
from .response import create_intensity_response, create_error_response, ErrorCodes

__all__ = [
    'setup_logger', 'get_logger',
    'create_intensity_response', 'create_error_response', 'ErrorCodes',
]

# Intensity Server Core Module
from .errors import (
    ComputationError,
    CorruptImageError,
    DecodeError,
    EmptyImageError,
    InternalProcessingError,
    MissingInputError,
    PayloadTooLargeError,
    UnsupportedFormatError,
)
from .image_decoder import DecodedImage, ImageFormat, decode, sniff_format
from .intensity import IntensityResult, compute_average_intensity, process

__all__ = [
    'ComputationError', 'CorruptImageError', 'DecodeError', 'EmptyImageError',
    'InternalProcessingError', 'MissingInputError', 'PayloadTooLargeError',
    'UnsupportedFormatError',
    'DecodedImage', 'ImageFormat', 'decode', 'sniff_format',
    'IntensityResult', 'compute_average_intensity', 'process',
]

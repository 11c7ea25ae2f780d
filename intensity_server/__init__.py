"""
Web Image Intensity Calculator
업로드된 이미지의 평균 밝기(0~255)를 계산하는 API 서버
"""

__version__ = "1.0.0"

# main.py
# Web Image Intensity Calculator API
# 연동: 프론트엔드 → POST /calculate-intensity (multipart, 필드 `image`)

import asyncio
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import Settings, get_settings
from .core import (
    ComputationError,
    EmptyImageError,
    InternalProcessingError,
    MissingInputError,
    PayloadTooLargeError,
    process,
)
from .utils.logger import setup_logger
from .utils.response import ErrorCodes, create_error_response, create_intensity_response

ERROR_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "status": {"type": "string", "example": "error"},
        "error_code": {"type": "string"},
        "message": {"type": "string"},
    },
}


def _error_doc(description: str) -> dict:
    return {
        "description": description,
        "content": {"application/json": {"schema": ERROR_RESPONSE_SCHEMA}},
    }


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPI 앱 생성

    Args:
        settings: 서버 설정 (없으면 환경 변수에서 로드)

    Returns:
        라우트와 예외 핸들러가 등록된 FastAPI 앱
    """
    settings = settings or get_settings()
    logger = setup_logger(log_level=settings.log_level)

    app = FastAPI(
        title="Web Image Intensity Calculator API",
        description="A REST API for calculating the average intensity of uploaded images",
        version="1.0.0",
        docs_url="/swagger-ui",
        redoc_url=None,
        openapi_url="/api-docs/openapi.json",
        openapi_tags=[
            {"name": "Image Processing", "description": "Image intensity calculation API"},
            {"name": "Health", "description": "Service health check"},
        ],
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ComputationError)
    async def computation_error_handler(request: Request, exc: ComputationError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.error_code)
        else:
            logger.warning("%s %s -> %d %s: %s", request.method, request.url.path,
                           exc.status_code, exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=create_error_response(exc.error_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # multipart 파싱 실패 / image 필드가 파일이 아닌 경우
        logger.warning("%s %s -> 400 invalid form data: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content=create_error_response(ErrorCodes.MISSING_INPUT, MissingInputError.default_message),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("%s %s -> 500 unexpected error", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=create_error_response(ErrorCodes.SERVER_ERROR, InternalProcessingError.default_message),
        )

    @app.post(
        "/calculate-intensity",
        tags=["Image Processing"],
        summary="Calculate the average intensity of an uploaded image",
        responses={
            400: _error_doc("Bad request - invalid or missing image data"),
            413: _error_doc("Payload too large - image exceeds the upload limit"),
            422: _error_doc("Unprocessable entity - invalid image format"),
            500: _error_doc("Internal error while processing the image"),
        },
    )
    async def calculate_intensity(
        image: Optional[UploadFile] = File(
            None, description="Image file uploaded as multipart/form-data with field name 'image'"
        ),
    ):
        """
        이미지 평균 밝기 계산. multipart/form-data, 필드 `image`.
        응답: average_intensity (소수점 둘째 자리), message.
        """
        if image is None:
            raise MissingInputError()

        # 최대 크기 + 1 바이트만 읽어서 초과 여부 판단
        contents = await image.read(settings.max_upload_bytes + 1)
        if len(contents) > settings.max_upload_bytes:
            raise PayloadTooLargeError(
                f"Uploaded image exceeds the maximum allowed size of {settings.max_upload_bytes} bytes."
            )
        if not contents:
            raise EmptyImageError()

        # 디코딩/계산은 CPU 작업이므로 스레드 풀에서 실행, 요청별 시간 제한 적용
        try:
            result = await asyncio.wait_for(
                asyncio.get_running_loop().run_in_executor(None, process, contents),
                timeout=settings.request_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error("Image processing exceeded %.1fs budget (%d bytes)",
                         settings.request_timeout_seconds, len(contents))
            raise InternalProcessingError() from None

        logger.info("Average intensity %.2f over %d pixels (%s, %d bytes)",
                    result.average_intensity, result.pixels_processed, image.filename, len(contents))
        return create_intensity_response(result.average_intensity)

    @app.get("/health", tags=["Health"], response_class=PlainTextResponse)
    async def health_check():
        return "OK"

    return app


app = create_app()


def run():
    import uvicorn

    settings = app.state.settings
    logger = setup_logger(log_level=settings.log_level)
    logger.info("Server running on http://%s:%d", settings.host, settings.port)
    logger.info("POST /calculate-intensity - Upload an image to calculate average intensity")
    logger.info("GET  /health - Health check endpoint")
    logger.info("GET  /swagger-ui - Swagger documentation UI")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

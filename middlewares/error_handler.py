import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.exceptions import NotFound, ResultServiceError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message), latency_ms=0)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def add_error_handlers(app: FastAPI):
    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(ResultServiceError)
    async def result_error_handler(request: Request, exc: ResultServiceError):
        logger.warning(f"요청 처리 실패: {request.method} {request.url.path} - {exc.code}: {exc.message}")
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 오류: {request.method} {request.url.path}", exc_info=exc)
        return _error_response(500, "INTERNAL_ERROR", str(exc))

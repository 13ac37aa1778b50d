"""
Global exception handling and request middleware for the Candidate Evaluation API

Every error leaves the service as {"error": "<message>"}.
"""
import time
import traceback
import uuid
from typing import Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from candidate_eval.utils.exceptions import CandidateEvalError, PayloadTooLargeError, status_code_for
from candidate_eval.utils.logging_config import get_logger

logger = get_logger(__name__)

HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def error_response(status_code: int, message: str, request_id: str = None) -> JSONResponse:
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Global exception handler middleware"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        except CandidateEvalError as exc:
            status_code = status_code_for(exc)
            log = logger.warning if status_code < 500 else logger.error
            log(
                f"{exc.__class__.__name__} in {request.method} {request.url.path}: {exc.message}",
                extra={"request_id": request_id, "error": exc.to_dict()}
            )
            return error_response(status_code, exc.message, request_id)

        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                exc_info=True
            )
            # Internal details stay in the logs
            return error_response(500, "Internal server error", request_id)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and timing. Bodies carry applicant documents and are never logged."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = _request_id(request)
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        response = await call_next(request)

        processing_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
            extra={"request_id": request_id, "status_code": response.status_code, "processing_time": processing_time}
        )
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects request bodies above ``max_bytes`` on the given paths"""

    def __init__(self, app, max_bytes: int, paths: Iterable[str]):
        super().__init__(app)
        self.max_bytes = max_bytes
        self.paths = set(paths)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.paths and request.method in ("POST", "PUT", "PATCH"):
            content_length = request.headers.get("content-length")
            if content_length is not None and content_length.isdigit():
                too_large = int(content_length) > self.max_bytes
            else:
                too_large = len(await request.body()) > self.max_bytes
            if too_large:
                exc = PayloadTooLargeError(limit=self.max_bytes)
                logger.warning(f"Rejected {request.method} {request.url.path}: body exceeds {self.max_bytes} bytes")
                return error_response(status_code_for(exc), exc.message, _request_id(request))

        return await call_next(request)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = HTTP_ERROR_MESSAGES.get(exc.status_code)
    if message is None:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message, _request_id(request))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        f"Invalid request body in {request.method} {request.url.path}",
        extra={"request_id": _request_id(request), "validation_errors": exc.errors()}
    )
    return error_response(400, "Invalid request body", _request_id(request))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

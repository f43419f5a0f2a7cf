from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from subplay.api.errors import SubplayApiError
from subplay.api.middlewares.request_context import get_request_id
from subplay.utils.logger import get_logger

logger = get_logger("subplay.api")


def install_error_handlers(app: FastAPI) -> None:
    """
    Route errors become {"error": {code, message, details, request_id}}.
    """

    @app.exception_handler(SubplayApiError)
    async def _handle_api_error(request: Request, exc: SubplayApiError) -> JSONResponse:
        rid = get_request_id(request) or ""
        logger.info(f"API_ERROR rid={rid} code={exc.code} status={exc.status_code} msg={exc.message}")
        body = {"code": exc.code, "message": exc.message, "details": exc.details or {}, "request_id": rid}
        return JSONResponse(status_code=exc.status_code, content={"error": body})

# erp/http_problem_handlers.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from erp.api.problem import ProblemDetail, make_problem
from erp.services.errors import ServiceError

logger = logging.getLogger("erp.http")


def _new_trace_id() -> str:
    return f"t_{uuid.uuid4().hex[:12]}"


def _request_ctx(req: Request) -> Dict[str, Any]:
    return {"path": getattr(req.url, "path", ""), "method": req.method}


def _problem_from_http_exc(req: Request, exc: HTTPException) -> Dict[str, Any]:
    """
    HTTPException.detail → Problem body. Accepted detail shapes:
    - str
    - {"code","message"}
    - {"error_code","message",...} (already a Problem)
    """
    status_code = int(exc.status_code)
    trace_id = _new_trace_id()
    ctx = _request_ctx(req)
    d = exc.detail

    if isinstance(d, dict) and "error_code" in d and "message" in d:
        out = dict(d)
        out.setdefault("http_status", status_code)
        out.setdefault("trace_id", trace_id)
        out["context"] = {**ctx, **(out.get("context") or {})}
        return out

    if isinstance(d, dict) and "code" in d and "message" in d:
        return make_problem(
            status_code=status_code,
            error_code=str(d.get("code") or "http_error"),
            message=str(d.get("message") or "Request rejected"),
            context=ctx,
            trace_id=trace_id,
        )

    msg = str(d) if d is not None else "Request rejected"
    return make_problem(
        status_code=status_code,
        error_code="http_error",
        message=msg,
        context=ctx,
        details=[{"type": "state", "reason": msg}],
        trace_id=trace_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_exc(req: Request, exc: ServiceError):
        content = make_problem(
            status_code=exc.status,
            error_code=exc.error_code,
            message=exc.message,
            context={**exc.context, **_request_ctx(req)},
            trace_id=_new_trace_id(),
        )
        return JSONResponse(status_code=exc.status, content=content)

    @app.exception_handler(IntegrityError)
    async def _integrity_exc(req: Request, exc: IntegrityError):
        trace_id = _new_trace_id()
        logger.warning("INTEGRITY_ERROR[%s]: %s", trace_id, exc.orig)
        content = make_problem(
            status_code=409,
            error_code="conflict",
            message="The request conflicts with the current state of the data",
            context=_request_ctx(req),
            trace_id=trace_id,
        )
        return JSONResponse(status_code=409, content=content)

    @app.exception_handler(Exception)
    async def _unhandled_exc(req: Request, exc: Exception):
        trace_id = _new_trace_id()
        logger.exception("UNHANDLED_EXC[%s]: %s", trace_id, exc)
        content = make_problem(
            status_code=500,
            error_code="internal_error",
            message="Internal server error",
            context=_request_ctx(req),
            trace_id=trace_id,
        )
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(RequestValidationError)
    async def _validation_exc(req: Request, exc: RequestValidationError):
        details: List[ProblemDetail] = []
        for e in exc.errors():
            loc = ".".join(str(p) for p in e.get("loc", ()) if p != "body")
            details.append(
                {"type": "validation", "path": loc, "reason": str(e.get("msg") or "invalid")}
            )
        content = make_problem(
            status_code=422,
            error_code="request_validation_error",
            message="Request parameters are invalid",
            context=_request_ctx(req),
            details=details,
            trace_id=_new_trace_id(),
        )
        return JSONResponse(status_code=422, content=content)

    @app.exception_handler(HTTPException)
    async def _http_exc(req: Request, exc: HTTPException):
        content = _problem_from_http_exc(req, exc)
        return JSONResponse(status_code=int(exc.status_code), content=content)

# erp/api/problem.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, TypedDict


class ProblemDetail(TypedDict, total=False):
    type: str  # validation|state|conflict
    path: str  # e.g. items[1].quantity
    reason: str


@dataclass(frozen=True)
class Problem:
    error_code: str
    message: str
    http_status: int
    context: Optional[Dict[str, Any]] = None
    details: Optional[List[ProblemDetail]] = None
    trace_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
            "http_status": int(self.http_status),
        }
        if self.context:
            out["context"] = self.context
        if self.details:
            out["details"] = self.details
        if self.trace_id:
            out["trace_id"] = self.trace_id
        return out


def make_problem(
    *,
    status_code: int,
    error_code: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    details: Optional[Sequence[ProblemDetail]] = None,
    trace_id: Optional[str] = None,
) -> Dict[str, Any]:
    p = Problem(
        error_code=str(error_code),
        message=str(message),
        http_status=int(status_code),
        context=context,
        details=list(details) if details else None,
        trace_id=trace_id,
    )
    return p.to_dict()

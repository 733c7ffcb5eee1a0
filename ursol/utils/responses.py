from typing import Any, Dict, List, NoReturn

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError

from ursol.core.exceptions import AppError


def create_error_detail(error: AppError) -> Dict[str, Any]:
    """Error envelope carried in HTTPException.detail."""
    return {
        "error": error.error_code,
        "message": error.message,
        "detail": error.details,
    }


def raise_http_error(error: AppError) -> NoReturn:
    raise HTTPException(status_code=error.status_code, detail=create_error_detail(error))


def format_validation_errors(exc: RequestValidationError) -> str:
    """Aggregate request validation errors into one readable message."""
    messages: List[str] = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        message = err.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"

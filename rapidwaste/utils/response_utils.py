import re
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from rapidwaste.core.exceptions import RapidWasteError
from rapidwaste.schemas.base import (
    create_success_response,
    create_error_response,
    create_list_response,
)
from rapidwaste.core.logging_config import get_logger

logger = get_logger(__name__)


class ResponseWrapper:
    """Utility class for wrapping responses in standard format"""

    @staticmethod
    def success(data: Any = None, message: str = "Success") -> Dict[str, Any]:
        return jsonable_encoder(create_success_response(data, message))

    @staticmethod
    def listing(items: List[Any], message: str = "Success") -> Dict[str, Any]:
        return jsonable_encoder(create_list_response(items, message))

    @staticmethod
    def error(
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Wrap error response and make it JSON-safe"""
        raw = create_error_response(message, error_code, details)
        return jsonable_encoder(raw)

    @staticmethod
    def created(data: Any = None, message: str = "Resource created successfully") -> Dict[str, Any]:
        return ResponseWrapper.success(data, message)

    @staticmethod
    def updated(data: Any = None, message: str = "Resource updated successfully") -> Dict[str, Any]:
        return ResponseWrapper.success(data, message)


def _conflicting_fields(error_msg: str) -> Dict[str, str]:
    match = re.search(r"Key \((.*?)\)=\((.*?)\)", error_msg)
    if not match:
        return {}
    columns = match.group(1).split(", ")
    values = match.group(2).split(", ")
    return {col: val for col, val in zip(columns, values)}


def handle_db_error(error: Exception) -> HTTPException:
    """Convert database errors to HTTP exceptions with detailed info"""
    error_msg = str(error).strip().replace("\n", " ")
    lowered = error_msg.lower()

    if "duplicate key" in lowered or "unique constraint" in lowered:
        detail = ResponseWrapper.error(
            message="Resource already exists with the same values",
            error_code="DUPLICATE_RESOURCE",
            details={"db_error": error_msg, "conflicting_fields": _conflicting_fields(error_msg)},
        )
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)

    elif "foreign key" in lowered:
        detail = ResponseWrapper.error(
            message="Referenced resource not found",
            error_code="FOREIGN_KEY_VIOLATION",
            details={"db_error": error_msg, "conflicting_fields": _conflicting_fields(error_msg)},
        )
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

    logger.error(f"Database operation failed: {error_msg}")
    detail = ResponseWrapper.error(
        message="Database operation failed",
        error_code="DATABASE_ERROR",
        details={"db_error": error_msg},
    )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def handle_domain_error(error: RapidWasteError) -> HTTPException:
    """Translate a domain error into the standard error envelope"""
    if error.status_code >= 500:
        logger.error(f"[{error.error_code}] {error.message}")
    else:
        logger.warning(f"[{error.error_code}] {error.message}")
    detail = ResponseWrapper.error(
        message=error.message,
        error_code=error.error_code,
        details=error.details or None,
    )
    return HTTPException(status_code=error.status_code, detail=detail)


def handle_http_error(error: Exception) -> HTTPException:
    """Convert HTTP and generic exceptions into structured ResponseWrapper format"""
    if isinstance(error, HTTPException):
        detail = getattr(error, "detail", str(error))
        if isinstance(detail, dict) and detail.get("success") is not None:
            return error

        detail = ResponseWrapper.error(
            message=str(detail),
            error_code="HTTP_ERROR",
            details={"original_error": detail},
        )
        return HTTPException(status_code=error.status_code, detail=detail)

    logger.exception(f"Unexpected HTTP error: {error}")
    detail = ResponseWrapper.error(
        message="Unexpected server error",
        error_code="INTERNAL_SERVER_ERROR",
        details={"original_error": str(error)},
    )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

from typing import Any, Dict, List, Optional
from datetime import datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Utility functions for creating consistent responses
def create_success_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """Create a success response with a server local timestamp"""
    return {
        "success": True,
        "message": message,
        "data": data,
        "timestamp": datetime.now().strftime(TIMESTAMP_FORMAT)
    }

def create_list_response(items: List[Any], message: str = "Success") -> Dict[str, Any]:
    """Success response for unpaginated listings, with the item count"""
    response = create_success_response(items, message)
    response["count"] = len(items)
    return response

def create_error_response(message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Create an error response with a server local timestamp"""
    return {
        "success": False,
        "message": message,
        "error_code": error_code,
        "details": details,
        "timestamp": datetime.now().strftime(TIMESTAMP_FORMAT)
    }

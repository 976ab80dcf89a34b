#!/usr/bin/env python3
"""
Schema Definitions for Screenshoter CLI

This module provides the response models used for --json output and a helper
to validate output against them.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Third-party package documentation:
- Pydantic: https://docs.pydantic.dev/

Sample input:
- format_cli_response(True, data={"collections": [...]})
- format_cli_response(False, error="Capture session is not running.")

Expected output:
- {"success": True, "data": {"collections": [...]}}
- {"success": False, "error": "Capture session is not running."}
"""

from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel


# Response structure models
class ErrorResponse(BaseModel):
    """Error response model"""
    success: bool = False
    error: str
    details: Optional[Dict[str, Any]] = None


class SuccessResponse(BaseModel):
    """Success response model"""
    success: bool = True
    data: Dict[str, Any]


def format_cli_response(
    success: bool,
    data: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Format a standardized CLI response.

    Args:
        success: Whether the operation was successful
        data: Response data (for successful operations)
        error: Error message (for failed operations)
        details: Extra error context, e.g. the error kind

    Returns:
        Dict[str, Any]: Formatted response
    """
    if success and data is not None:
        return SuccessResponse(data=data).model_dump()
    elif not success and error is not None:
        response = ErrorResponse(error=error, details=details).model_dump()
        if response.get('details') is None:
            del response['details']
        return response
    else:
        return {"success": success}


def response_from_result(result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Wrap a core result dictionary (CaptureResult.to_dict() and the like).

    Failed results keep their error kind and category under details.
    """
    if result.get("success", False):
        return format_cli_response(True, data=result)
    details = {key: result[key] for key in ("error_kind", "error_category") if key in result}
    return format_cli_response(False, error=result.get("error", "Operation failed"), details=details or None)


def validate_output_against_schema(output: Dict[str, Any], schema_model: Type[BaseModel]) -> Tuple[bool, Optional[str]]:
    """
    Validate output against a schema model.

    Args:
        output: Output data to validate
        schema_model: Pydantic model to validate against

    Returns:
        Tuple[bool, Optional[str]]: (is_valid, error_message)
    """
    try:
        schema_model(**output)
        return True, None
    except Exception as e:
        return False, str(e)

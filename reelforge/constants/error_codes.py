"""Error codes dictionary.

Single source of truth for error codes, their retryability and suggested
fixes. Used by ``ReelforgeError.to_error_info`` to build machine-readable
error payloads for callers that embed the renderer.
"""

from typing import TypedDict


class ErrorCodeSpec(TypedDict, total=False):
    """Specification for an error code."""

    retryable: bool
    suggested_fix: str


ERROR_CODES: dict[str, ErrorCodeSpec] = {
    # ==========================================================================
    # Project document errors
    # ==========================================================================
    "PROJECT_LOAD_FAILED": {
        "retryable": False,
        "suggested_fix": "Check that the project file exists and is valid JSON",
    },
    "INVALID_TIME_RANGE": {
        "retryable": False,
        "suggested_fix": "Make sure every scene, overlay and subtitle ends after it starts",
    },
    "INVALID_FIELD_VALUE": {
        "retryable": False,
    },
    "VALIDATION_ERROR": {
        "retryable": False,
    },
    # ==========================================================================
    # Internal errors
    # ==========================================================================
    "INTERNAL_ERROR": {
        "retryable": False,
    },
}


def get_error_spec(code: str) -> ErrorCodeSpec:
    """Get error specification by code.

    Args:
        code: The error code

    Returns:
        ErrorCodeSpec with retryable flag and suggested fix
    """
    return ERROR_CODES.get(code, {"retryable": False})


def is_retryable(code: str) -> bool:
    """Check if an error code is retryable."""
    spec = get_error_spec(code)
    return spec.get("retryable", False)

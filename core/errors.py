# core/errors.py

from fastapi import HTTPException

from core.logging_config import logger


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors (APIError: message/code/details/hint)
      • GoTrue (Auth) errors (AuthApiError: message/status)
      • Generic Python exceptions
    """

    message = getattr(error, "message", None)
    if message:
        return str(message)

    if getattr(error, "args", None):
        return str(error.args[0])

    return str(error) or "Unknown Supabase error"


def extract_error_code(error: Exception) -> str:
    """Postgres SQLSTATE (e.g. 23505) when PostgREST supplied one."""
    code = getattr(error, "code", None)
    return str(code) if code else ""


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Map a Supabase error onto an HTTPException.
    Returns (doesn't raise) so the caller can re-raise with `raise`.

    Args:
        error: The exception that occurred
        operation: What failed, e.g. "Failed to create land record"
        status_code: Fallback status when the error is not recognised
    """
    if isinstance(error, HTTPException):
        return error

    detail = extract_supabase_error(error)
    code = extract_error_code(error)
    logger.error(f"{operation}: {detail}" + (f" (code {code})" if code else ""))

    lowered = detail.lower()
    if code == "23505" or "duplicate" in lowered or "unique" in lowered:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    if code == "23503" or "foreign key" in lowered:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    if code == "23514" or "check constraint" in lowered:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid value")
    if code == "42501" or "row-level security" in lowered:
        return HTTPException(status_code=403, detail=f"{operation}: Not permitted")
    if code == "PGRST116" or "not found" in lowered or "does not exist" in lowered:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")

    return HTTPException(status_code=status_code, detail=operation)


def auth_error(error: Exception, status_code: int = 400) -> HTTPException:
    """
    Authentication failures surface the platform's message verbatim
    (bad credentials, duplicate signup, weak password...).
    """
    detail = extract_supabase_error(error)
    logger.warning(f"Auth failure: {detail}")
    return HTTPException(status_code=status_code, detail=detail)

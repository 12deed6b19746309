"""Translate failed gateway results into HTTP errors."""

from fastapi import HTTPException, status

from tasktrack.services.results import GatewayResult

_UNAUTHORIZED_IDENTITY_CODES = {
    "invalid_credentials",
    "login_required",
    "session_missing",
    "session_not_found",
}


def http_error_for(result: GatewayResult, fallback: str) -> HTTPException:
    """
    Build the HTTPException for a failed gateway result.

    - identity errors: 401 for bad credentials, a missing session or a
      verification that needs a fresh login, else 400
    - storage errors: 404 when the task does not exist remotely, else 502

    Args:
        result: A result with success=False
        fallback: Detail used when the gateway supplied no message
    """
    detail = result.error or fallback

    if result.error_kind == "storage":
        if result.error_code == "not_found":
            return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)

    if result.error_code in _UNAUTHORIZED_IDENTITY_CODES:
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

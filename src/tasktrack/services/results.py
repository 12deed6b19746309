"""Result envelope returned by every gateway operation."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class GatewayError(Exception):
    """
    Base exception for failures at a remote-service boundary.

    Attributes:
        code: Short machine-readable reason (e.g. "not_found", "invalid_credentials")
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class GatewayResult(BaseModel, Generic[T]):
    """
    Outcome of a gateway call.

    Gateways never raise; callers branch on `success` and read either `data`
    or `error`/`error_code`.

    Example:
        >>> result = GatewayResult.ok({"id": "t1"})
        >>> result.success
        True
        >>> GatewayResult.fail(GatewayError("boom", code="write_failed")).error
        'boom'
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    error_kind: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "GatewayResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: GatewayError) -> "GatewayResult":
        return cls(
            success=False,
            error=error.message,
            error_code=error.code,
            error_kind=getattr(error, "kind", None),
        )

"""Error envelope shared by every endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str = Field(examples=["INVALID_TRANSITION"])
    message: str = Field(examples=["Store is already rejected"])
    detail: dict[str, Any] | None = Field(
        default=None,
        description='Context for the error. Always has "outcome": rejected | retry | partial',
    )


class ErrorResponse(BaseModel):
    """{ "error": { "code": str, "message": str, "detail": object } }

    outcome "rejected" means nothing happened, "retry" means the action did not
    take effect and may be repeated.
    """

    error: ErrorDetail

    @classmethod
    def build(cls, code: str, message: str, **detail: Any) -> dict[str, Any]:
        return cls(error=ErrorDetail(code=code, message=message, detail=detail or None)).model_dump()

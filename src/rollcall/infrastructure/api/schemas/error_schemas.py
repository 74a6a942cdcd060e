"""Error body schemas, used to document error responses in OpenAPI."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Tagged error body: ``{"_tag": "Unauthorized"}``."""

    model_config = ConfigDict(populate_by_name=True)

    tag: str = Field(..., alias="_tag", description="Error tag")


class NotFoundResponse(ErrorResponse):
    """Not-found error carrying the requested ID."""

    id: int


class ValidationIssue(BaseModel):
    path: list[str | int]
    message: str


class ValidationErrorResponse(ErrorResponse):
    issues: list[ValidationIssue]

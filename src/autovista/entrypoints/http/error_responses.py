"""REST API error response models.

Structured error responses that provide consistent format for all HTTP errors.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Individual error detail for field-level errors.

    Used in validation errors to indicate which form field failed and why.
    """

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "discountedPrice",
                "message": "Discounted price must be less than regular price.",
                "code": "INVALID_FIELD",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Supports:
    - Simple errors (just detail and code)
    - Multi-field validation errors (detail + errors array)
    - Error codes for i18n (code field can be used for translation keys)

    Examples:
        Simple error:
            {
                "detail": "You can't edit this listing",
                "code": "FORBIDDEN"
            }

        Listing form with two failing fields:
            {
                "detail": "Validation failed",
                "code": "VALIDATION_ERROR",
                "errors": [
                    {"field": "year", "message": "Invalid year.", "code": "INVALID_FIELD"},
                    {
                        "field": "images",
                        "message": "You can upload a maximum of 6 images.",
                        "code": "INVALID_FIELD"
                    }
                ]
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Listing with identifier 'abc' not found", "code": "NOT_FOUND"},
                {"detail": "Could not fetch listings", "code": "QUERY_FAILED"},
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "year",
                            "message": "Invalid year.",
                            "code": "INVALID_FIELD",
                        },
                        {
                            "field": "images",
                            "message": "You can upload a maximum of 6 images.",
                            "code": "INVALID_FIELD",
                        },
                    ],
                },
            ]
        }
    )

"""Tests for REST error response models."""

from autovista.entrypoints.http.error_responses import ErrorDetail, ErrorResponse


class TestErrorDetail:
    """Tests for ErrorDetail model."""

    def test_creates_error_detail_with_all_fields(self) -> None:
        detail = ErrorDetail(
            field="discountedPrice",
            message="Discounted price must be less than regular price.",
            code="INVALID_FIELD",
        )

        assert detail.field == "discountedPrice"
        assert detail.code == "INVALID_FIELD"

    def test_code_is_optional(self) -> None:
        detail = ErrorDetail(field="cursor", message="Invalid cursor")

        assert detail.model_dump() == {"field": "cursor", "message": "Invalid cursor", "code": None}


class TestErrorResponse:
    """Tests for ErrorResponse model."""

    def test_simple_error(self) -> None:
        response = ErrorResponse(detail="Could not fetch listings", code="QUERY_FAILED")

        assert response.errors is None
        assert response.model_dump(exclude_none=True) == {
            "detail": "Could not fetch listings",
            "code": "QUERY_FAILED",
        }

    def test_form_errors(self) -> None:
        response = ErrorResponse(
            detail="Validation failed",
            code="VALIDATION_ERROR",
            errors=[
                ErrorDetail(field="year", message="Invalid year.", code="INVALID_FIELD"),
                ErrorDetail(field="images", message="You can upload a maximum of 6 images."),
            ],
        )

        dumped = response.model_dump()

        assert [error["field"] for error in dumped["errors"]] == ["year", "images"]

    def test_parses_handler_output(self) -> None:
        payload = {
            "detail": "Invalid request parameters",
            "code": "VALIDATION_ERROR",
            "errors": [{"field": "min_price", "message": "String should match pattern", "code": "string_pattern_mismatch"}],
        }

        response = ErrorResponse.model_validate(payload)

        assert response.errors is not None
        assert response.errors[0].field == "min_price"

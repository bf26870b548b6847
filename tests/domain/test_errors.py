"""Tests for domain error classes."""

from autovista.domain.errors import (
    ConflictError,
    DomainError,
    FilterValidationError,
    ForbiddenError,
    NotFoundError,
    PagingValidationError,
    QueryFailedError,
    UnauthorizedError,
    UploadFailedError,
    ValidationError,
)


class TestDomainError:
    def test_stores_message_and_context(self) -> None:
        error = DomainError("Something went wrong", listing_id="abc")

        assert error.message == "Something went wrong"
        assert error.error_code == "DOMAIN_ERROR"
        assert error.context == {"listing_id": "abc"}
        assert str(error) == "Something went wrong"

    def test_to_dict_flattens_context(self) -> None:
        error = DomainError("Test error", field="year")

        assert error.to_dict() == {"message": "Test error", "code": "DOMAIN_ERROR", "field": "year"}


class TestValidationError:
    def test_simple_message(self) -> None:
        error = ValidationError("Invalid input")

        assert error.message == "Invalid input"
        assert error.errors is None
        assert error.to_dict() == {"message": "Invalid input", "code": "VALIDATION_ERROR"}

    def test_field_errors_default_message(self) -> None:
        error = ValidationError(
            errors=[{"field": "year", "message": "Invalid year.", "code": "INVALID_FIELD"}]
        )

        assert error.message == "Validation failed"
        assert error.to_dict()["errors"] == [
            {"field": "year", "message": "Invalid year.", "code": "INVALID_FIELD"}
        ]

    def test_field_messages(self) -> None:
        error = ValidationError(
            errors=[
                {"field": "year", "message": "Invalid year."},
                {"field": "mileage", "message": "Invalid mileage."},
            ]
        )

        assert error.field_messages() == {"year": "Invalid year.", "mileage": "Invalid mileage."}

    def test_no_errors_gives_empty_field_messages(self) -> None:
        assert ValidationError("x").field_messages() == {}

    def test_filter_and_paging_errors_are_validation_errors(self) -> None:
        assert FilterValidationError("bad").error_code == "VALIDATION_ERROR"
        assert isinstance(PagingValidationError("bad"), ValidationError)


class TestOtherErrors:
    def test_not_found_with_identifier(self) -> None:
        error = NotFoundError("Listing", "abc")

        assert error.message == "Listing with identifier 'abc' not found"
        assert error.context == {"resource": "Listing", "identifier": "abc"}

    def test_not_found_without_identifier(self) -> None:
        assert NotFoundError("User").message == "User not found"

    def test_error_codes(self) -> None:
        assert ConflictError("x").error_code == "CONFLICT"
        assert UnauthorizedError("x").error_code == "UNAUTHORIZED"
        assert ForbiddenError("x").error_code == "FORBIDDEN"
        assert UploadFailedError("x").error_code == "UPLOAD_FAILED"

    def test_query_failed_default_message(self) -> None:
        error = QueryFailedError()

        assert error.message == "Could not fetch listings"
        assert error.error_code == "QUERY_FAILED"

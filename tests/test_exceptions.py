"""
Tests for the service error taxonomy
"""
import pytest

from market_db.exceptions import (
    ERROR_CLASSES,
    ConfigError,
    ConflictError,
    ConnectionError,
    DatabaseError,
    ErrorKind,
    NotFoundError,
    ServiceError,
    ValidationError,
    is_service_error,
)


class TestExceptions:
    """Test custom exceptions"""

    @pytest.mark.parametrize("error_class,status", [
        (ConfigError, 500),
        (ConnectionError, 503),
        (ConflictError, 409),
        (NotFoundError, 404),
        (ValidationError, 400),
        (DatabaseError, 500),
    ])
    def test_http_status(self, error_class, status):
        error = error_class("Something happened")

        assert error.http_status == status
        assert isinstance(error, ServiceError)
        assert is_service_error(error)

    def test_every_kind_has_a_class(self):
        assert set(ERROR_CLASSES) == set(ErrorKind)
        for kind, error_class in ERROR_CLASSES.items():
            assert error_class.kind is kind

    def test_str_includes_original(self):
        error = DatabaseError("Insert failed", original_error=RuntimeError("disk full"))

        assert str(error) == "Insert failed (Original: disk full)"

    def test_str_without_original(self):
        assert str(NotFoundError("Order not found")) == "Order not found"

    def test_conflict_defaults(self):
        error = ConflictError()

        assert error.message == "Resource already exists"
        assert error.constraint is None

    def test_not_found_for_resource(self):
        assert NotFoundError.for_resource("User", 42).message == "User with ID '42' not found"
        assert NotFoundError.for_resource("User").message == "User not found"

    def test_validation_field(self):
        error = ValidationError("Quantity must be positive", field="quantity")

        assert error.field == "quantity"
        assert error.to_dict() == {"error": "Validation Error", "message": "Quantity must be positive"}

    def test_internal_detail_hidden(self):
        database = DatabaseError('relation "users" does not exist')
        connection = ConnectionError("could not connect to server at 10.0.0.5")

        assert database.public_message == "An internal database error occurred"
        assert connection.to_dict() == {
            "error": "Service Unavailable",
            "message": "Database connection error",
        }

    def test_builtin_connection_error_untouched(self):
        assert not issubclass(ConnectionError, OSError)
        assert not is_service_error(OSError("x"))

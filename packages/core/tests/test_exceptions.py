"""Tests for the paycal exception hierarchy."""

import pytest

from paycal_core.exceptions import (
    ConfigurationError,
    LedgerError,
    PaycalError,
    ValidationError,
)


class TestExceptions:
    """Test suite for PaycalError and its subclasses."""

    def test_base_error_fields(self):
        error = PaycalError("Something went wrong", details={"month": "2024-01"})

        assert str(error) == "Something went wrong"
        assert error.details == {"month": "2024-01"}
        assert error.recoverable is False
        assert "PaycalError(message='Something went wrong'" in repr(error)

    def test_validation_error_details(self):
        """Field, value and constraint are copied into details."""
        error = ValidationError(
            "Invalid month key", field="month", value="2024-13", constraint="YYYY-MM"
        )

        assert error.recoverable is True
        assert error.details == {"field": "month", "value": "2024-13", "constraint": "YYYY-MM"}

    def test_ledger_error_details(self):
        error = LedgerError("Save failed", operation="save", month_key="2024-02")
        assert error.details == {"operation": "save", "month_key": "2024-02"}

    def test_configuration_error_details(self):
        error = ConfigurationError(
            "Bad buffer", config_key="PAYCAL_PROJECTION_RESERVE_BUFFER", expected=">= 0", actual="-5"
        )
        assert error.details["config_key"] == "PAYCAL_PROJECTION_RESERVE_BUFFER"
        assert error.recoverable is False

    @pytest.mark.parametrize("error_class", [ValidationError, LedgerError, ConfigurationError])
    def test_all_errors_are_paycal_errors(self, error_class):
        with pytest.raises(PaycalError):
            raise error_class("boom")

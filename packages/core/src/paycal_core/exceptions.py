"""Custom exceptions for paycal.

Data conditions that the engine can describe in its output (unscheduled
expenses, a debt strategy that never converges, the payoff month cap) are
NOT exceptions; they are reported in the result models. The classes below
cover the remaining failures: malformed input handed to the mapper or the
month parser, invalid settings, and ledger repository failures.

All exceptions inherit from PaycalError, so callers can catch the whole
family at once.

Example:
    try:
        snapshot = snapshot_from_budget_data(raw)
    except ValidationError as e:
        logger.warning("budget_data_rejected", field=e.field)
        raise
    except PaycalError as e:
        logger.error("budget_data_failed", error=str(e))
"""

from typing import Any, Optional


class PaycalError(Exception):
    """Base exception for all paycal errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise PaycalError("Something went wrong", details={"month": "2024-01"})
        PaycalError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize PaycalError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                corrected input or a retry. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(PaycalError):
    """Error raised when input data has the wrong shape.

    Raised by the month parser and the budget-data mapper when a value
    cannot be interpreted at all (as opposed to being merely incomplete,
    which the engine tolerates).

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Invalid month key",
        ...     field="month",
        ...     value="2024-13",
        ...     constraint="YYYY-MM with month 01-12",
        ... )
        ValidationError: Invalid month key
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class LedgerError(PaycalError):
    """Error raised by a bill payment ledger repository.

    The engine itself never persists anything; repository implementations
    owned by the caller raise this when loading or saving fails.

    Attributes:
        operation: The repository operation that failed ("load" or "save").
        month_key: The ledger month involved, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        month_key: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.operation = operation
        self.month_key = month_key

        if operation:
            self.details["operation"] = operation
        if month_key:
            self.details["month_key"] = month_key


class ConfigurationError(PaycalError):
    """Error raised when configuration is invalid.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Reserve buffer must not be negative",
        ...     config_key="PAYCAL_PROJECTION_RESERVE_BUFFER",
        ...     expected=">= 0",
        ...     actual="-5",
        ... )
        ConfigurationError: Reserve buffer must not be negative
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "PaycalError",
    "ValidationError",
    "LedgerError",
    "ConfigurationError",
]

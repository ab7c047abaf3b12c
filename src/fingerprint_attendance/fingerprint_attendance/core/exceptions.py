class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid (bad/missing/future date, malformed punches)."""


class InvalidStatusCombination(ValidationError):
    """Raised when more than one status is active on the same day."""


class InsufficientLeaveBalance(DomainError):
    """Raised when a day is moved into annual leave with no balance left."""


class EmployeeNotFound(DomainError):
    """Raised when the employee code is unknown to the directory."""


class ComputationAnomaly(DomainError):
    """Impossible punch data. Recovered inside the engine by zeroing the day."""

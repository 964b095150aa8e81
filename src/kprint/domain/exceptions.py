"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Transport failures are deliberately *not* part of this hierarchy: the
printer gateway reports them as failed ``PrintResult`` values so the queue
processor can always make a retry decision.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class MissingFieldError(ValidationError):
    """An order record lacks a field required to build a receipt."""

    def __init__(self, field_name: str, order_ref: object = None) -> None:
        where = f" on order {order_ref}" if order_ref is not None else ""
        super().__init__(f"Missing required field '{field_name}'{where}")
        self.field_name = field_name


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConfigurationError(DomainException):
    """Settings are missing or cannot be parsed."""


class WorkerAbortedError(DomainException):
    """The print worker hit its consecutive-error ceiling and stopped."""

"""Custom exception hierarchy for loan-origination."""


class LoanOriginationError(Exception):
    """Base exception for all loan-origination errors."""


class EntityNotFoundError(LoanOriginationError):
    """Raised when a referenced loan does not exist."""


class EntityAlreadyExistsError(LoanOriginationError):
    """Raised when a loan id is already present in the store."""


class InvalidEntityStateError(LoanOriginationError):
    """Raised when an entity is in an invalid state for the operation."""


class InvalidStateTransitionError(InvalidEntityStateError):
    """Raised when a transition would break the linear state order."""


class InvestmentExceedsPrincipalError(InvalidEntityStateError):
    """Raised when an investment would push the funded total past principal."""


class ConfigurationError(LoanOriginationError):
    """Raised when configuration is invalid or missing."""


class PublishError(LoanOriginationError):
    """Raised when an event publisher fails to deliver a message."""


class OperationCancelledError(LoanOriginationError):
    """Raised when an operation is entered with its cancel signal already set."""


class LoanOperationError(LoanOriginationError):
    """Raised by the service when a step of a loan operation fails.

    The message carries the operation prefix (``"approval failed: ..."``);
    the underlying error is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.cause = cause

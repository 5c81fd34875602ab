class DomainError(Exception):
    """Base class for domain-specific errors."""

    pass


class BakeryTransportError(DomainError):
    """Raised when a retrieval call to the baker backend fails at transport level.

    Only raised under the ``raise`` retrieval failure policy; mutating calls
    report transport failures through a ServiceError envelope instead.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {type(cause).__name__}")
        self.operation = operation
        self.cause = cause


class BakeryNotFoundError(DomainError):
    """Exception raised when a recipe or instance is not known to the backend."""

    pass

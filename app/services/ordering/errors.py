"""Order and gateway error taxonomy."""


class OrderError(Exception):
    """Base class for errors surfaced to the user as a failed order or fetch."""

    kind = "unknown"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(OrderError):
    """Precondition violated locally; the gateway is never contacted."""

    kind = "validation"


class TransportError(OrderError):
    """Gateway call did not complete normally (network, HTTP status, decoding)."""

    kind = "transport"


class BusinessError(OrderError):
    """Gateway answered, but its status codes reject the request."""

    kind = "business"


class UnknownError(OrderError):
    """Catch-all for failures not classified above."""

    kind = "unknown"

    def __init__(self, message: str = "An unknown error occurred."):
        super().__init__(message)


class OrderInProgressError(OrderError):
    """A submission is already in flight."""

    kind = "in_progress"

    def __init__(self, message: str = "An order submission is already in progress."):
        super().__init__(message)

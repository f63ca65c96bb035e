class PaginationError(ValueError):
    """Client-side problem with a list request. Maps to a 4xx response."""


class InvalidCursorError(PaginationError):
    def __init__(self, cursor: str | None, reason: str = "malformed cursor") -> None:
        super().__init__(f"Invalid cursor: {reason}")
        self.cursor = cursor
        self.reason = reason


class InvalidFilterError(PaginationError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid filter on {field!r}: {reason}")
        self.field = field
        self.reason = reason


class InvalidPageRequestError(PaginationError):
    pass


class DataAccessError(RuntimeError):
    """The record store failed to answer a query. Maps to a 5xx response."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, message: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=message or f"{resource} not found",
        )


class ValidationError(HTTPException):
    """Raised when request validation fails."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


class UpstreamServiceError(HTTPException):
    """Raised when GitHub or Claude fails in a way the caller cannot fix."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=message,
        )


class PersistenceError(HTTPException):
    """Raised when a database write fails."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )

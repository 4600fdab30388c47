from fastapi import HTTPException, status


class ApiError(HTTPException):
    """Base for every error the API reports through the response envelope."""

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(status_code=status_code or self.status_code_default, detail=message)

    @property
    def message(self) -> str:
        return self.detail


class InvalidArgument(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST


class Unauthorized(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED


class NotFound(ApiError):
    status_code_default = status.HTTP_404_NOT_FOUND


class UploadError(ApiError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR


class RemoteDeleteError(ApiError):
    """A remote asset could not be deleted after the record was already changed.

    ``orphaned_urls`` lists the assets left on the media host.
    """

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, orphaned_urls: list[str] | None = None):
        super().__init__(message)
        self.orphaned_urls = list(orphaned_urls or [])


class StoreError(ApiError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Database error"):
        super().__init__(message)

"""Custom exception classes for the PPZ-Logalyzer upload core."""

from typing import Optional


class LogalyzerError(Exception):
    """Base exception for all PPZ-Logalyzer errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class UploadTransportError(LogalyzerError):
    """Error while sending a file through an upload transport."""

    def __init__(
        self,
        message: str,
        item_id: Optional[str] = None,
        file_name: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="UPLOAD_TRANSPORT", **kwargs)
        self.item_id = item_id
        self.file_name = file_name
        self.details.update({
            "item_id": item_id,
            "file_name": file_name,
        })


class ConfigurationError(LogalyzerError):
    """Error in upload configuration values."""

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        value: Optional[object] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="CONFIGURATION", **kwargs)
        self.option = option
        self.value = value
        self.details.update({
            "option": option,
            "value": value,
        })


class AuthenticationRequiredError(LogalyzerError):
    """Raised when an operation needs a session token and none is present."""

    def __init__(self, message: str = "Please log in to upload files", **kwargs):
        super().__init__(message, error_code="AUTH_REQUIRED", **kwargs)


class StateStoreError(LogalyzerError):
    """Error reading or writing persisted client state."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        key: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="STATE_STORE", **kwargs)
        self.path = path
        self.key = key
        self.details.update({
            "path": path,
            "key": key,
        })

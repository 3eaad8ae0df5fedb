"""Error taxonomy shared across capture, storage and generation."""


class FitScanError(Exception):
    """Base exception for the fitscan package."""
    pass


class ValidationError(FitScanError):
    """Required input is missing or incomplete.

    Raised synchronously at the action boundary, before any asynchronous
    call is issued. ``field`` names the offending input when there is one.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class CameraPermissionError(FitScanError, PermissionError):
    """Camera access was denied; the capture session is aborted."""
    pass


class StorageError(FitScanError):
    """Persistent storage could not be read or written."""
    pass


class GenerationServiceError(FitScanError):
    """Transport or service-side failure talking to the image service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

class UploadError(ValueError):
    """Request rejected before or while talking to external services."""


class InvalidRequestError(UploadError):
    pass


class UnknownOrganizationError(InvalidRequestError):
    def __init__(self, societa: str):
        super().__init__("Società non riconosciuta")
        self.societa = societa


class PayloadError(UploadError):
    pass


class DriveAPIError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

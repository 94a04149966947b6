# helpdesk/core/errors.py


class HelpdeskError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(HelpdeskError):
    status_code = 400


class NotFound(HelpdeskError):
    status_code = 404


class Conflict(HelpdeskError):
    status_code = 409


class Unauthorized(HelpdeskError):
    status_code = 401


class StorageError(HelpdeskError):
    status_code = 500


__all__ = [
    "HelpdeskError",
    "ValidationError",
    "NotFound",
    "Conflict",
    "Unauthorized",
    "StorageError",
]

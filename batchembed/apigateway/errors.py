from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    code: str = "internal_error"
    message: str = "Internal server error"
    status_code: int = 500

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self):
        return {"code": self.code, "message": self.message}


class InvalidRequestError(ApiError):
    code = "invalid_request"
    message = "Invalid request"
    status_code = 400


class UnauthorizedError(ApiError):
    code = "unauthorized"
    message = "Authentication failed"
    status_code = 401


class NotFoundError(ApiError):
    code = "not_found"
    message = "Resource not found"
    status_code = 404


class PayloadTooLargeError(ApiError):
    code = "payload_too_large"
    message = "Payload too large"
    status_code = 413


class ServiceUnavailableError(ApiError):
    code = "service_unavailable"
    message = "Job queue is not accepting work"
    status_code = 503

"""
Error categories surfaced by the API.

Each error carries the HTTP status and the public message the caller sees.
Internal detail goes to the log, never into `message`.
"""

from __future__ import annotations


class AppError(Exception):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, *, detail: str | None = None):
        super().__init__(detail or message)
        self.message = message
        self.detail = detail

    def to_response(self) -> dict:
        return {"message": self.message, "code": self.code}


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__(", ".join(self.messages))

    def to_response(self) -> dict:
        return {"message": self.message, "code": self.code, "errors": self.messages}


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "QR code not found"):
        super().__init__(message)


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = 401


class EncodingError(AppError):
    code = "ENCODING_ERROR"

    def __init__(self, detail: str):
        super().__init__("Server error during QR code generation", detail=detail)


class StoreError(AppError):
    code = "STORE_ERROR"

    def __init__(self, detail: str, *, message: str = "Server error accessing QR code storage"):
        super().__init__(message, detail=detail)

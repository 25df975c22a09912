"""
Error taxonomy for the bookstore API.

Engines raise these exceptions; ``main.py`` converts them into the JSON
envelope ``{"success": false, "message": ...}`` with the matching status
code. Validation errors additionally carry the list of offending fields.
"""

from typing import List, Optional


class BookstoreError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(BookstoreError):
    status_code = 400

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.fields:
            body["fields"] = self.fields
        return body


class MissingFieldsError(ValidationError):
    def __init__(self, missing: List[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}", missing)

    @property
    def missing_fields(self) -> List[str]:
        return self.fields

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, "missingFields": self.fields}


class InvalidNumberError(ValidationError):
    pass


class NegativeValueError(ValidationError):
    pass


class InvalidDiscountError(ValidationError):
    pass


class AuthError(BookstoreError):
    status_code = 401


class MissingTokenError(AuthError):
    status_code = 401

    def __init__(self, message: str = "Token required"):
        super().__init__(message)


class InvalidTokenError(AuthError):
    status_code = 403

    def __init__(self, message: str = "Token invalid"):
        super().__init__(message)


class ForbiddenError(AuthError):
    status_code = 403

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    status_code = 401


class NotFoundError(BookstoreError):
    status_code = 404


class ProductNotFoundError(NotFoundError):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class StockError(BookstoreError):
    status_code = 400

    def __init__(self, message: str = "Insufficient stock"):
        super().__init__(message)


class StorageError(BookstoreError):
    status_code = 500


class PaymentError(BookstoreError):
    status_code = 500

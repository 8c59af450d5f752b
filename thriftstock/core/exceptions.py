# thriftstock/core/exceptions.py


class InventoryError(Exception):
    """Base exception for the inventory backend."""

    status_code = 500

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message shown to the caller
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message or "An error occurred in the inventory system"
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to the JSON error body."""
        error_dict = {"error": self.message}

        if self.code:
            error_dict["code"] = self.code

        if self.details:
            error_dict["details"] = self.details

        return error_dict


class ValidationError(InventoryError):
    """Missing or invalid input."""

    status_code = 400

    def __init__(self, message=None, code=None, details=None):
        message = message or "Invalid input"
        super().__init__(message, code, details)


class InsufficientStockError(ValidationError):
    """A stock-out asked for more units than are on hand."""

    def __init__(self, message=None, code="insufficient_stock", details=None):
        message = message or "Insufficient stock"
        super().__init__(message, code, details)


class AuthError(InventoryError):
    """Bad credentials or missing/invalid token."""

    status_code = 401

    def __init__(self, message=None, code=None, details=None):
        message = message or "Invalid username or password"
        super().__init__(message, code, details)


class NotFoundError(InventoryError):
    status_code = 404

    def __init__(self, message=None, code=None, details=None):
        message = message or "Not found"
        super().__init__(message, code, details)


class ConflictError(InventoryError):
    """Duplicate unique key, or a row still referenced elsewhere."""

    status_code = 409

    def __init__(self, message=None, code=None, details=None):
        message = message or "Conflict"
        super().__init__(message, code, details)

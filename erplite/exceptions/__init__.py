"""Custom exceptions for the ERP-lite request handlers."""

class ErpError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['error'] = self.message
        return rv

class ValidationError(ErpError):
    """Raised for malformed or incomplete requests."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)

class AuthorizationError(ErpError):
    """Raised when no caller identity can be resolved from the credential."""
    def __init__(self, message="Unauthorized", status_code=401):
        super().__init__(message, status_code)

class TenantAccessError(AuthorizationError):
    """Raised when the caller is not allowed to act for a business."""
    def __init__(self, message="You do not have access to this business"):
        super().__init__(message, 403)

class NotFoundError(ErpError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class PersistenceError(ErpError):
    """A database step failed. `step` names which one (e.g. 'sale', 'sale_items')."""
    def __init__(self, message, step, details=None):
        super().__init__(message, 500, {'details': details or ''})
        self.step = step
        self.details = details or ''

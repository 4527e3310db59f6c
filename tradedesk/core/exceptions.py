from typing import Optional


class TradedeskError(Exception):
    """Base exception for the Tradedesk strategy console"""
    pass

class ConfigurationError(TradedeskError):
    """Configuration related errors"""
    pass

class CatalogError(TradedeskError):
    """Strategy catalog errors (malformed definitions, unknown type keys)"""
    pass

class ValidationError(TradedeskError):
    """Raised when a draft field fails validation"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

class AccessDeniedError(TradedeskError):
    """Creation of a strategy type is not allowed on the user's plan"""
    pass

class EditorStateError(TradedeskError):
    """Operation not allowed in the editor's current state"""
    pass

class SubmissionInProgressError(EditorStateError):
    """A submission is already in flight for this editor"""
    pass

class ApiError(TradedeskError):
    """Backend request failed"""

    def __init__(self, detail: Optional[str] = None, status: Optional[int] = None):
        super().__init__(detail or f"Request failed with status {status}")
        self.detail = detail
        self.status = status

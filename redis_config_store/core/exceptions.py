from typing import Any, Dict, Optional


class ConfigStoreException(Exception):
    """Base exception class cho config store"""
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ArgumentError(ConfigStoreException):
    """Missing or invalid argument"""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="ARGUMENT_ERROR",
            details=details
        )


class StateError(ConfigStoreException):
    """Invalid state transition"""
    
    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="STATE_ERROR"
        )


class StoreError(ConfigStoreException):
    """Underlying Redis operation failed"""
    
    def __init__(
        self,
        message: str = "Store operation failed",
        key: Optional[str] = None,
        operation: Optional[str] = None
    ):
        details = {}
        if key is not None:
            details["key"] = key
        if operation is not None:
            details["operation"] = operation
        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            details=details
        )

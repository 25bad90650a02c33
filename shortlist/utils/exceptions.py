"""
Custom Exception Classes for the Shortlisting API
"""
from typing import Dict, Any
from fastapi import HTTPException


class ShortlistBaseException(Exception):
    """Base exception for the Shortlisting API"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ShortlistBaseException):
    """Raised when request input is missing or invalid"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class ExtractionError(ShortlistBaseException):
    """Raised when a document cannot be turned into text"""

    def __init__(self, message: str, filename: str = None, document_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if filename:
            details['filename'] = filename
        if document_type:
            details['document_type'] = document_type
        super().__init__(message, error_code="EXTRACTION_ERROR", details=details, **kwargs)


class ScoringError(ShortlistBaseException):
    """Raised when scoring a resume fails"""

    def __init__(self, message: str, filename: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if filename:
            details['filename'] = filename
        super().__init__(message, error_code="SCORING_ERROR", details=details, **kwargs)


class ConfigurationError(ShortlistBaseException):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


class ExternalServiceError(ShortlistBaseException):
    """Raised when an external collaborator (embeddings, OCR) fails"""

    def __init__(self, message: str, service_name: str = None, status_code: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if service_name:
            details['service_name'] = service_name
        if status_code:
            details['status_code'] = status_code
        super().__init__(message, error_code="EXTERNAL_SERVICE_ERROR", details=details, **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ShortlistBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        ConfigurationError: 500,
        ExtractionError: 500,
        ScoringError: 500,
        ExternalServiceError: 502,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """
    Re-raises foreign exceptions from a block as ``error_cls`` carrying the
    operation name and context; custom and HTTP exceptions pass through.
    """

    def __init__(self, operation: str, logger=None, error_cls=ScoringError, **context):
        self.operation = operation
        self.logger = logger
        self.error_cls = error_cls
        self.context = context

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or not issubclass(exc_type, Exception):
            return False
        if isinstance(exc_val, (ShortlistBaseException, HTTPException)):
            return False

        if self.logger:
            self.logger.error(
                f"{self.operation} failed: {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )
        raise self.error_cls(
            f"{self.operation} failed: {exc_val}",
            details={**self.context, "operation": self.operation},
            cause=exc_val
        ) from exc_val

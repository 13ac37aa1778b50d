"""
Custom Exception Classes for the Candidate Evaluation API
"""
from typing import Dict, Any


class CandidateEvalError(Exception):
    """Base exception for the Candidate Evaluation API"""

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
        """Convert exception to dictionary for logging"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(CandidateEvalError):
    """Raised when a required request field is missing or malformed"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class ConfigurationError(CandidateEvalError):
    """Raised when a required credential or setting is missing"""

    def __init__(self, message: str, config_key: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


class NotFoundError(CandidateEvalError):
    """Raised when a requested resource does not exist"""

    def __init__(self, message: str, resource: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if resource:
            details['resource'] = resource
        super().__init__(message, error_code="NOT_FOUND", details=details, **kwargs)


class PayloadTooLargeError(CandidateEvalError):
    """Raised when a request body exceeds the configured size cap"""

    def __init__(self, message: str = "Request body too large", limit: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if limit:
            details['limit_bytes'] = limit
        super().__init__(message, error_code="PAYLOAD_TOO_LARGE", details=details, **kwargs)


class UpstreamError(CandidateEvalError):
    """Raised when the LLM or storage API answers with a non-success status"""

    def __init__(self, message: str, service_name: str = None, status_code: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if service_name:
            details['service_name'] = service_name
        if status_code:
            details['status_code'] = status_code
        super().__init__(message, error_code="UPSTREAM_ERROR", details=details, **kwargs)


class UpstreamRateLimitedError(CandidateEvalError):
    """Raised when the LLM API keeps answering 429 after every retry"""

    def __init__(self, message: str, attempts: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if attempts:
            details['attempts'] = attempts
        super().__init__(message, error_code="RATE_LIMIT_ERROR", details=details, **kwargs)


class ResponseFormatError(CandidateEvalError):
    """Raised when the model reply holds no locatable or parsable JSON object"""

    def __init__(self, message: str = "Invalid response format", **kwargs):
        super().__init__(message, error_code="RESPONSE_FORMAT_ERROR", **kwargs)


# HTTP status mapping
STATUS_CODE_MAPPING = {
    ValidationError: 400,
    NotFoundError: 404,
    PayloadTooLargeError: 413,
    ConfigurationError: 500,
    UpstreamError: 500,
    UpstreamRateLimitedError: 500,
    ResponseFormatError: 500,
}


def status_code_for(exc: CandidateEvalError) -> int:
    """Map custom exceptions to HTTP status codes"""
    return STATUS_CODE_MAPPING.get(type(exc), 500)

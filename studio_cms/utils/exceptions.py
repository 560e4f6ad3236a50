"""Custom exceptions for the Studio content API"""

from typing import Any, Dict, List, Optional


class CMSError(Exception):
    """Base exception; carries the HTTP status and stable error code"""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(CMSError):
    """Payload failed schema validation"""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Validation failed"


class InvalidJSONError(CMSError):
    code = "INVALID_JSON"
    status_code = 400
    default_message = "Invalid JSON format"


class InvalidIdError(CMSError):
    code = "INVALID_ID"
    status_code = 400
    default_message = "Invalid ID parameter"


class InvalidContentTypeError(CMSError):
    code = "INVALID_CONTENT_TYPE"
    status_code = 400
    default_message = "Content-Type must be application/json or multipart/form-data"


class SerializationError(CMSError):
    """Document could not be encoded as JSON"""

    code = "SERIALIZATION_ERROR"
    status_code = 400
    default_message = "Data cannot be serialized to JSON"


class NotFoundError(CMSError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class DocumentNotFoundError(NotFoundError):
    """Document file does not exist"""
    pass


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class AuthError(CMSError):
    code = "AUTH_ERROR"
    status_code = 401
    default_message = "Authentication failed"


class NoTokenError(AuthError):
    code = "NO_TOKEN"
    default_message = "No token provided"


class InvalidTokenError(AuthError):
    code = "INVALID_TOKEN"
    default_message = "Invalid or expired token"


class MissingAuthHeaderError(AuthError):
    code = "MISSING_AUTH_HEADER"
    default_message = "Authorization header required"


class InvalidCredentialsError(AuthError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid username or password"


class InvalidCurrentPasswordError(AuthError):
    code = "INVALID_CURRENT_PASSWORD"
    default_message = "Current password is incorrect"


class MissingCredentialsError(CMSError):
    code = "MISSING_CREDENTIALS"
    status_code = 400
    default_message = "Username and password are required"


class MissingPasswordsError(CMSError):
    code = "MISSING_PASSWORDS"
    status_code = 400
    default_message = "Current password and new password are required"


class PasswordTooShortError(CMSError):
    code = "PASSWORD_TOO_SHORT"
    status_code = 400
    default_message = "New password is too short"


class InsufficientPermissionsError(CMSError):
    code = "INSUFFICIENT_PERMISSIONS"
    status_code = 403
    default_message = "Admin access required"


class DatabaseError(CMSError):
    code = "DATABASE_ERROR"
    status_code = 500
    default_message = "Database operation failed"


class CorruptDocumentError(DatabaseError):
    """Document file exists but is not parseable JSON"""
    pass


class FileOperationError(CMSError):
    code = "FILE_ERROR"
    status_code = 500
    default_message = "File operation failed"


class UploadError(CMSError):
    code = "UPLOAD_ERROR"
    status_code = 400
    default_message = "Invalid file upload"


class NoFileError(UploadError):
    code = "NO_FILE"
    default_message = "No file uploaded"


class InvalidFileError(UploadError):
    code = "INVALID_FILE"
    default_message = "Invalid file upload"


class FileTooLargeError(UploadError):
    code = "FILE_TOO_LARGE"
    default_message = "File too large"


class UnexpectedFileError(UploadError):
    code = "UNEXPECTED_FILE"
    default_message = "Unexpected file field"


class MailDeliveryError(CMSError):
    code = "MAIL_DELIVERY_ERROR"
    status_code = 502
    default_message = "Failed to send email"


class RateLimitError(CMSError):
    """Request budget for the client exhausted"""

    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429
    default_message = "Too many requests, please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None):
        self.retry_after = retry_after
        super().__init__(message)


class ConfigError(CMSError):
    """Configuration error"""

    code = "CONFIG_ERROR"
    default_message = "Configuration error"

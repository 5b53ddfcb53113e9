"""
Application exceptions rendered by the centralized handlers in error_handlers.py
"""

from typing import Optional, Dict, Any, Iterable


class BaseAppException(Exception):
    """Базовое исключение приложения"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


# === Ошибки аутентификации ===
class AuthenticationError(BaseAppException):
    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 401, "AUTHENTICATION_ERROR", details)


class AuthorizationError(BaseAppException):
    def __init__(
        self, message: str = "Access denied", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, 403, "AUTHORIZATION_ERROR", details)


# === Ошибки валидации ===
class ValidationError(BaseAppException):
    """Ошибка валидации данных"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 400, "VALIDATION_ERROR", details)


# === Ошибки ресурсов ===
class NotFoundError(BaseAppException):
    """Ресурс не найден"""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
            details = {"resource": resource, "identifier": identifier}
        else:
            message = f"{resource} not found"
            details = {"resource": resource}
        super().__init__(message, 404, "NOT_FOUND", details)


class ProductsNotFoundError(NotFoundError):
    """One or more requested products do not exist"""

    def __init__(self, missing_ids: Iterable[int]):
        missing = sorted(missing_ids)
        super().__init__("Product", ", ".join(str(i) for i in missing))
        self.message = "Product not found"
        self.details = {"resource": "Product", "missing_ids": missing}


# === Бизнес-логика ===
class BusinessLogicError(BaseAppException):
    """Ошибка бизнес-логики"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 400, "BUSINESS_LOGIC_ERROR", details)


class InvalidStatusTransitionError(BusinessLogicError):
    def __init__(self, resource: str, current: str, requested: str):
        message = f"Cannot change {resource} status from {current} to {requested}"
        details = {"resource": resource, "current": current, "requested": requested}
        super().__init__(message, details)


# === Ошибки базы данных ===
class DatabaseError(BaseAppException):
    """Ошибка базы данных"""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 500, "DATABASE_ERROR", details)


class DatabaseConnectionError(BaseAppException):
    """Ошибка подключения к базе данных"""

    def __init__(self, message: str = "Database connection failed"):
        super().__init__(message, 503, "DATABASE_CONNECTION_ERROR")


class DatabaseTimeoutError(BaseAppException):
    """Таймаут операции с базой данных"""

    def __init__(self, operation: str, timeout: int):
        message = f"Database operation '{operation}' timed out after {timeout}s"
        details = {"operation": operation, "timeout": timeout}
        super().__init__(message, 504, "DATABASE_TIMEOUT", details)


class DatabaseIntegrityError(BaseAppException):
    """Ошибка целостности данных"""

    def __init__(self, constraint: str, details: Optional[Dict[str, Any]] = None):
        message = f"Database integrity constraint violated: {constraint}"
        error_details = {"constraint": constraint}
        if details:
            error_details.update(details)
        super().__init__(message, 409, "DATABASE_INTEGRITY_ERROR", error_details)


# === Ошибки внешних сервисов ===
class ExternalServiceError(BaseAppException):
    """Ошибка внешнего сервиса"""

    def __init__(
        self,
        service: str,
        message: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ):
        message = message or f"External service '{service}' error"
        details = {"service": service}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(message, 502, "EXTERNAL_SERVICE_ERROR", details)


# === Ошибки конфигурации ===
class ConfigurationError(BaseAppException):
    """Ошибка конфигурации"""

    def __init__(self, parameter: str, message: Optional[str] = None):
        message = (
            message or f"Configuration parameter '{parameter}' is invalid or missing"
        )
        details = {"parameter": parameter}
        super().__init__(message, 500, "CONFIGURATION_ERROR", details)

"""Service layer — business logic orchestration."""


class ServiceError(Exception):
    """Base service exception."""


class NotFoundError(ServiceError):
    """Resource not found (-> HTTP 404)."""


class ConflictError(ServiceError):
    """Business rule conflict (-> HTTP 409)."""


class ValidationError(ServiceError):
    """Invalid or forbidden request field (-> HTTP 422)."""

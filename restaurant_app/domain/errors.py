# restaurant_app/domain/errors.py


class ServiceError(Exception):
    """Bazowy blad domeny, mapowany na status HTTP w api/errors.py."""

    kind = "service_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class ValidationError(ServiceError):
    kind = "validation_error"


class PersistenceError(ServiceError):
    kind = "persistence_error"


class ProviderError(ServiceError):
    kind = "provider_error"


class AuthenticationError(ServiceError):
    kind = "authentication_error"


class ForbiddenError(ServiceError):
    kind = "forbidden"


class MalformedPayloadError(ServiceError):
    kind = "malformed_payload"


class NotFoundError(ServiceError):
    kind = "not_found"


class OrderNotFoundError(NotFoundError):
    kind = "order_not_found"


class CapacityError(ServiceError):
    kind = "capacity_error"


class ConfigurationError(ServiceError):
    kind = "configuration_error"

"""
Sistema di gestione errori centralizzato per il tracking delle spedizioni
"""
from abc import ABC
from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(Enum):
    """Codici errore standardizzati"""
    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    INVALID_STATUS = "INVALID_STATUS"
    UNRECOGNIZED_VOCABULARY = "UNRECOGNIZED_VOCABULARY"

    # Business logic errors
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Not found errors
    TRACKING_NOT_FOUND = "TRACKING_NOT_FOUND"

    # Infrastructure errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"
    RATE_LIMITED = "RATE_LIMITED"

    # Authentication errors
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


class BaseApplicationException(Exception, ABC):
    """Base exception per l'applicazione"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400
    ):
        self.message = message
        self.error_code = error_code.value
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Converte l'eccezione in dizionario per la risposta API"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "status_code": self.status_code
        }


class ValidationException(BaseApplicationException):
    """Errori di validazione (input vuoto o malformato)"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 400)


class UnrecognizedVocabularyException(BaseApplicationException):
    """Tag/codice corriere fuori dal vocabolario curato"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.UNRECOGNIZED_VOCABULARY, details, 422)


class NotFoundException(BaseApplicationException):
    """Il corriere non conosce la spedizione"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.TRACKING_NOT_FOUND, details, 404)


class AlreadyExistsError(BaseApplicationException):
    """Errore quando un tracking è già registrato"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.ALREADY_EXISTS, details, 409)


class ConfigurationException(BaseApplicationException):
    """Adapter senza credenziali"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details, 503)


class AuthenticationException(BaseApplicationException):
    """Credenziali rifiutate dal servizio esterno"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        # 502: the upstream rejected our key, not the caller's credentials
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS, details, 502)


class RateLimitException(BaseApplicationException):
    """Quota del servizio esterno superata"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.RATE_LIMITED, details, 429)


class UpstreamTimeoutException(BaseApplicationException):
    """Servizio esterno non ha risposto entro il timeout"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.UPSTREAM_TIMEOUT, details, 504)


class UpstreamException(BaseApplicationException):
    """Risposta inattesa o malformata dal servizio esterno"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.EXTERNAL_SERVICE_ERROR, details, 502)


# Factory per creare eccezioni specifiche
class ExceptionFactory:
    """Factory per creare eccezioni ricorrenti"""

    @staticmethod
    def tracking_number_required() -> ValidationException:
        return ValidationException(
            "Le numero de suivi est requis",
            ErrorCode.REQUIRED_FIELD_MISSING,
            {"field_name": "tracking_number"}
        )

    @staticmethod
    def carrier_required() -> ValidationException:
        return ValidationException(
            "Le transporteur est requis",
            ErrorCode.REQUIRED_FIELD_MISSING,
            {"field_name": "carrier"}
        )

    @staticmethod
    def message_required() -> ValidationException:
        return ValidationException(
            "Le message est requis",
            ErrorCode.REQUIRED_FIELD_MISSING,
            {"field_name": "message"}
        )

    @staticmethod
    def not_configured(service_name: str) -> ConfigurationException:
        return ConfigurationException(
            f"{service_name} API key not configured",
            {"service": service_name}
        )

    @staticmethod
    def parcel_not_found(tracking_number: str, reason: Optional[str] = None) -> NotFoundException:
        return NotFoundException(
            reason or "Colis non trouvé",
            {"tracking_number": tracking_number}
        )

import httpx
import logging
from typing import Dict, Any, Optional

from pydantic import ValidationError

from parceltrack.core.exceptions import (
    AuthenticationException,
    ExceptionFactory,
    NotFoundException,
    UpstreamException,
    UpstreamTimeoutException,
)
from parceltrack.core.settings import get_carrier_integration_settings
from parceltrack.schemas.colissimo_tracking_schema import ColissimoTrackingResponseSchema

logger = logging.getLogger(__name__)


class ColissimoClient:
    """Colissimo Timeline REST API HTTP client (API key header auth)

    Raises typed exceptions; the tracking service converts them to results.
    No retry: a single attempt bounded by the configured timeout.
    """

    API_KEY_HEADER = "X-Okapi-Key"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = get_carrier_integration_settings()
        self.api_key = (api_key if api_key is not None else self.settings.colissimo_api_key or "").strip()
        self.base_url = (base_url or self.settings.colissimo_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else self.settings.colissimo_timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return len(self.api_key) > 0

    async def get_timeline(self, parcel_number: str) -> ColissimoTrackingResponseSchema:
        """
        Get Colissimo timeline for a parcel

        Args:
            parcel_number: Colissimo parcel number (tracking number)

        Returns:
            Validated Colissimo response envelope

        Raises:
            AuthenticationException: 401, API key rejected
            NotFoundException: 404, unknown parcel
            UpstreamTimeoutException: no answer within the timeout
            UpstreamException: any other HTTP status, transport error or malformed payload
        """
        url = f"{self.base_url}/timelineCompany"
        params = {"parcelNumber": parcel_number}
        headers = self._get_headers()

        logger.info(f"Colissimo Get Timeline Request URL: {url}?parcelNumber={parcel_number}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Colissimo timeline request timed out after {self.timeout}s: {e}")
            raise UpstreamTimeoutException(
                "Service Colissimo temporairement indisponible",
                {"service": "colissimo", "timeout": self.timeout}
            )
        except httpx.HTTPError as e:
            logger.error(f"Colissimo timeline request error: {e}")
            raise UpstreamException(
                "Erreur lors de la récupération du suivi",
                {"service": "colissimo", "reason": str(e)}
            )

        logger.info(f"Colissimo Get Timeline Response Status: {response.status_code}")

        if response.status_code == 401:
            logger.error(f"Colissimo authentication failed. Response: {response.text}")
            raise AuthenticationException("Clé API Colissimo invalide", {"service": "colissimo"})
        if response.status_code == 404:
            raise ExceptionFactory.parcel_not_found(parcel_number)
        if response.status_code >= 400:
            raise UpstreamException(
                f"Erreur Colissimo: {response.status_code}",
                {"service": "colissimo", "status_code": response.status_code}
            )

        return self._parse_response(response, parcel_number)

    def _parse_response(self, response: httpx.Response, parcel_number: str) -> ColissimoTrackingResponseSchema:
        """Decode and validate the JSON envelope"""
        try:
            data: Dict[str, Any] = response.json()
        except ValueError as e:
            logger.error(f"Colissimo response is not valid JSON: {e}")
            raise UpstreamException(
                "Réponse Colissimo invalide",
                {"service": "colissimo", "reason": "invalid JSON"}
            )

        try:
            payload = ColissimoTrackingResponseSchema.model_validate(data)
        except ValidationError as e:
            logger.error(f"Colissimo response has unexpected shape: {e}")
            raise UpstreamException(
                "Réponse Colissimo invalide",
                {"service": "colissimo", "reason": "unexpected payload"}
            )

        if payload.error is not None:
            message = payload.error.message or "Erreur inconnue"
            if payload.parcel is None:
                raise NotFoundException(
                    message,
                    {"tracking_number": parcel_number, "colissimo_error_code": payload.error.code}
                )
            raise UpstreamException(
                message,
                {"service": "colissimo", "colissimo_error_code": payload.error.code}
            )

        if payload.parcel is None:
            raise ExceptionFactory.parcel_not_found(parcel_number)

        return payload

    def _get_headers(self) -> Dict[str, str]:
        """
        Generate HTTP headers for Colissimo API requests

        Returns:
            Headers dict
        """
        return {
            self.API_KEY_HEADER: self.api_key,
            "Accept": "application/json",
        }

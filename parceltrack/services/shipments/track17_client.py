import httpx
import json
import logging
from typing import Dict, Any, List, Optional

from pydantic import ValidationError

from parceltrack.core.exceptions import (
    AuthenticationException,
    RateLimitException,
    UpstreamException,
    UpstreamTimeoutException,
)
from parceltrack.core.settings import get_carrier_integration_settings
from parceltrack.schemas.track17_tracking_schema import Track17RequestItemSchema, Track17ResponseSchema

logger = logging.getLogger(__name__)


class Track17Client:
    """17TRACK v2.2 REST API HTTP client (token header auth)

    Endpoints are batch-shaped; this client sends one tracking number per call.
    """

    API_KEY_HEADER = "17token"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = get_carrier_integration_settings()
        self.api_key = (api_key if api_key is not None else self.settings.track17_api_key or "").strip()
        self.base_url = (base_url or self.settings.track17_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else self.settings.track17_timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return len(self.api_key) > 0

    async def get_track_info(self, number: str, carrier_code: Optional[int] = None) -> Track17ResponseSchema:
        """
        Get 17TRACK tracking information

        Args:
            number: Tracking number
            carrier_code: 17TRACK numeric carrier code, None to let 17TRACK detect it

        Returns:
            Validated 17TRACK response envelope
        """
        items = [Track17RequestItemSchema(number=number, carrier=carrier_code)]
        return await self._post("gettrackinfo", items)

    async def register(self, number: str, carrier_code: Optional[int] = None) -> Track17ResponseSchema:
        """
        Register a tracking number on 17TRACK (also returns the detected carrier)

        Args:
            number: Tracking number
            carrier_code: 17TRACK numeric carrier code, None to let 17TRACK detect it

        Returns:
            Validated 17TRACK response envelope
        """
        items = [Track17RequestItemSchema(number=number, carrier=carrier_code)]
        return await self._post("register", items)

    async def _post(self, endpoint: str, items: List[Track17RequestItemSchema]) -> Track17ResponseSchema:
        url = f"{self.base_url}/{endpoint}"
        headers = self._get_headers()
        payload = [item.model_dump(exclude_none=True) for item in items]

        logger.info(f"17TRACK Request URL: {url}")
        logger.info(f"17TRACK Request Method: POST")
        logger.info(f"17TRACK Request Payload: {json.dumps(payload, ensure_ascii=False)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            logger.warning(f"17TRACK {endpoint} request timed out after {self.timeout}s: {e}")
            raise UpstreamTimeoutException(
                "Service 17TRACK temporairement indisponible",
                {"service": "track17", "timeout": self.timeout}
            )
        except httpx.HTTPError as e:
            logger.error(f"17TRACK {endpoint} request error: {e}")
            raise UpstreamException(
                "Erreur lors de la récupération du suivi",
                {"service": "track17", "reason": str(e)}
            )

        logger.info(f"17TRACK Response Status: {response.status_code}")

        if response.status_code == 401:
            logger.error(f"17TRACK authentication failed. Response: {response.text}")
            raise AuthenticationException("Clé API 17TRACK invalide", {"service": "track17"})
        if response.status_code == 429:
            raise RateLimitException(
                "Quota 17TRACK dépassé (100/mois max en gratuit)",
                {"service": "track17"}
            )
        if response.status_code >= 400:
            raise UpstreamException(
                f"Erreur 17TRACK: {response.status_code}",
                {"service": "track17", "status_code": response.status_code}
            )

        return self._parse_response(response)

    def _parse_response(self, response: httpx.Response) -> Track17ResponseSchema:
        try:
            data: Dict[str, Any] = response.json()
        except ValueError as e:
            logger.error(f"17TRACK response is not valid JSON: {e}")
            raise UpstreamException("Réponse 17TRACK invalide", {"service": "track17", "reason": "invalid JSON"})

        try:
            payload = Track17ResponseSchema.model_validate(data)
        except ValidationError as e:
            logger.error(f"17TRACK response has unexpected shape: {e}")
            raise UpstreamException("Réponse 17TRACK invalide", {"service": "track17", "reason": "unexpected payload"})

        if payload.code != 0:
            raise UpstreamException(
                f"Erreur API 17TRACK: code {payload.code}",
                {"service": "track17", "track17_code": payload.code}
            )

        return payload

    def _get_headers(self) -> Dict[str, str]:
        """
        Generate HTTP headers for 17TRACK API requests

        Returns:
            Headers dict
        """
        return {
            self.API_KEY_HEADER: self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

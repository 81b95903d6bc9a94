"""
ShipEngine Carrier-Rate Provider

This module implements the ShipEngine API integration.

Features:
- Carrier account listing
- Rate shopping for a full shipment
- Rate estimates from postal data
- Label purchase from a rate

ShipEngine API Docs:
 - https://shipengine.github.io/shipengine-openapi/
 - https://www.shipengine.com/docs/rates/
 - https://www.shipengine.com/docs/labels/create-from-rate/
"""

import json
import logging
from typing import Dict, Any, List, Optional

import httpx

from reefcultures.core.config import get_settings
from reefcultures.core.exceptions import RateProviderError
from reefcultures.services.shipping.base import BaseCarrier

logger = logging.getLogger(__name__)


class ShipEngineClient(BaseCarrier):
    """
    Asynchronous client for the ShipEngine REST API (v1).

    Authenticates with the API-Key header and raises RateProviderError on any
    non-success response or network failure. No retries: a failed call
    propagates straight to the caller.
    """

    carrier_name = "ShipEngine"
    carrier_code = "shipengine"

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize the ShipEngine client

        Args:
            api_key: ShipEngine API key
            base_url: API root, defaults to SHIPENGINE_BASE_URL
            timeout: Request timeout in seconds, defaults to SHIPENGINE_TIMEOUT
        """
        settings = get_settings()
        self.api_key = api_key
        self.base_url = (base_url or settings.SHIPENGINE_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.SHIPENGINE_TIMEOUT

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests"""
        return {
            "API-Key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull the most useful message out of a ShipEngine error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"

        if isinstance(body, dict):
            errors = body.get("errors")
            if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("message"):
                return str(errors[0]["message"])
            if body.get("message"):
                return str(body["message"])
        return response.text or f"HTTP {response.status_code}"

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Any:
        """
        Make a request to the ShipEngine API

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint (without base URL)
            data: Request payload for POST requests
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            RateProviderError: If the API request fails
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = self._get_headers()

        masked_headers = headers.copy()
        masked_headers["API-Key"] = "[REDACTED]"
        logger.debug(f"Making {method} request to {url}")
        logger.debug(f"Headers: {masked_headers}")
        if data:
            logger.debug(f"Data: {json.dumps(data)[:500]}...")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=data,
                    params=params
                )
        except httpx.TimeoutException as e:
            logger.error(f"ShipEngine timeout on {endpoint}: {str(e)}")
            raise RateProviderError(f"ShipEngine request timed out: {str(e)}")
        except httpx.RequestError as e:
            logger.error(f"ShipEngine network error on {endpoint}: {str(e)}")
            raise RateProviderError(f"ShipEngine network error: {str(e)}")

        if response.status_code not in (200, 201, 202, 204):
            message = self._error_message(response)
            logger.error(f"ShipEngine API error {response.status_code} on {endpoint}: {message}")
            raise RateProviderError(message, upstream_status=response.status_code)

        if response.status_code == 204:
            return {}

        try:
            return response.json()
        except ValueError:
            logger.error(f"ShipEngine returned a non-JSON body on {endpoint}: {response.text[:200]}")
            raise RateProviderError(
                "ShipEngine returned an invalid JSON body", upstream_status=response.status_code
            )

    async def list_carriers(self) -> List[Dict[str, Any]]:
        """
        List carrier accounts connected to this ShipEngine account

        Returns:
            List of carrier objects (carrier_id, friendly_name, is_enabled...)

        Raises:
            RateProviderError: If the API request fails
        """
        data = await self._make_request("GET", "/carriers")
        carriers = data.get("carriers") if isinstance(data, dict) else None
        return carriers if isinstance(carriers, list) else []

    async def get_rates(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Rate-shop a full shipment

        Args:
            payload: {"rate_options": {"carrier_ids": [...]}, "shipment": {...}}

        Returns:
            Raw rate objects from rate_response.rates

        Raises:
            RateProviderError: If the API request fails
        """
        data = await self._make_request("POST", "/rates", data=payload)
        rate_response = data.get("rate_response") if isinstance(data, dict) else None
        rates = rate_response.get("rates") if isinstance(rate_response, dict) else None
        return rates if isinstance(rates, list) else []

    async def estimate_rates(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Estimate rates from postal data only

        The estimate endpoint returns a bare list; older accounts wrap it in
        rate_response or rates, so all three shapes are accepted.

        Raises:
            RateProviderError: If the API request fails
        """
        data = await self._make_request("POST", "/rates/estimate", data=payload)
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            rate_response = data.get("rate_response")
            if isinstance(rate_response, dict) and isinstance(rate_response.get("rates"), list):
                return rate_response["rates"]
            if isinstance(data.get("rates"), list):
                return data["rates"]
        return []

    async def create_label(self, rate_id: str) -> Dict[str, Any]:
        """
        Purchase a 4x6 PDF label for a quoted rate

        Args:
            rate_id: ShipEngine rate id (se-...)

        Returns:
            Label object (tracking_number, label_download, shipment_cost...)

        Raises:
            RateProviderError: If the API request fails
        """
        result = await self._make_request(
            "POST",
            "/labels",
            data={"rate_id": rate_id, "label_format": "pdf", "label_layout": "4x6"},
        )
        logger.info(f"Label purchased for rate {rate_id}: tracking {result.get('tracking_number', 'N/A')}")
        return result

"""HTTP implementation of the command backend."""

import asyncio
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from ..core.exceptions import RemoteServiceError
from ..core.logger import get_logger
from .base import unwrap_envelope

logger = get_logger(__name__)


class HttpCommandBackend:
    """
    Posts ``{"command": ..., "params": ...}`` to a single endpoint.

    Transport errors are retried with exponential backoff up to ``max_retries``
    times; HTTP errors and application errors are not retried.
    """

    def __init__(
        self,
        url: str,
        name: str = "mlb",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        max_retries: int = 0,
        base_retry_delay: float = 0.5,
    ) -> None:
        """
        Args:
            url: Command endpoint.
            name: Label used in logs and health reports.
            client: Optional shared client; one is created per call otherwise.
            timeout: Request timeout in seconds.
            max_retries: Retries after a transport failure.
            base_retry_delay: First backoff delay in seconds, doubled per retry.
        """
        self.url = url
        self.name = name
        self._client = client
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay

    async def call(self, command: str, params: Mapping[str, Any]) -> Any:
        body = {"command": command, "params": dict(params)}
        response = await self._post_with_retry(body)

        if not response.is_success:
            msg = f"{self.name} backend error ({command}): {response.status_code} - {response.text}"
            logger.warning(msg)
            raise RemoteServiceError(msg, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Non-JSON answer from %s for '%s'.", self.name, command)
            raise RemoteServiceError(f"Malformed payload from {self.name} for '{command}': {e}") from e

        return unwrap_envelope(payload, self.name, command)

    async def health(self) -> Dict[str, Any]:
        started = time.monotonic()
        try:
            response = await self._post({"command": "getTeamInfo", "params": {"queryParams": {"sportId": "1"}}})
        except httpx.HTTPError as e:
            return {"status": "error", "error": str(e)}
        return {
            "status": "healthy" if response.is_success else "unhealthy",
            "responseTime": round((time.monotonic() - started) * 1000, 1),
            "httpStatus": response.status_code,
        }

    async def _post_with_retry(self, body: Dict[str, Any]) -> httpx.Response:
        delay = self.base_retry_delay
        for attempt in range(self.max_retries + 1):
            try:
                return await self._post(body)
            except httpx.TransportError as e:
                if attempt == self.max_retries:
                    raise RemoteServiceError(f"{self.name} backend unreachable: {e}") from e
                logger.warning(
                    f"Transport error (Retry: {attempt + 1}/{self.max_retries}): {e}. Waiting {delay}s..."
                )
                await asyncio.sleep(delay)
                delay *= 2  # Exponential backoff
            except httpx.HTTPError as e:
                raise RemoteServiceError(f"{self.name} backend request failed: {e}") from e

        raise RemoteServiceError(f"Failed to reach {self.name} backend.")

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.url, json=body, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.url, json=body)

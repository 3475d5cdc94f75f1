"""OneSignal push notification client.

Overview
--------
Small async HTTP client that delivers push notifications through the
OneSignal REST API. Recipients are addressed by *external user id* (our
``users.id``, registered by the mobile/web app at login) or by OneSignal
player id.

Retries
-------
Transport errors, HTTP 429 and 5xx responses are retried with exponential
backoff: ``min(backoff_initial * backoff_factor**attempt, backoff_max)``
seconds, up to ``max_retries`` retries. Other 4xx responses are not retried.

Errors
------
``send`` never raises for delivery failures; it logs them and returns
``False`` so that notification side effects cannot fail the request that
triggered them. ``PushDeliveryError`` is raised internally and carries the
status code and response body.

Usage
-----
>>> client = OneSignalClient(app_id="...", api_key="...")
>>> await client.send(external_user_ids=["user-1"], title="Hi", message="Hello")
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from interior_manager.core.logging_config import get_logger
from interior_manager.server.core.config import settings

logger = get_logger(__name__)

ONESIGNAL_API_URL = "https://onesignal.com/api/v1/notifications"


class PushDeliveryError(Exception):
    """A push request failed.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code, when a response was received.
        details: Response body, when available.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    @property
    def retryable(self) -> bool:
        return self.status_code is None or self.status_code == 429 or self.status_code >= 500


class OneSignalClient:
    """Async client for the OneSignal notifications endpoint."""

    def __init__(
        self,
        app_id: Optional[str],
        api_key: Optional[str],
        *,
        api_url: str = ONESIGNAL_API_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        max_retries: int = 3,
        backoff_initial: float = 0.5,
        backoff_factor: float = 2.0,
        backoff_max: float = 8.0,
    ) -> None:
        """Create a OneSignal client.

        Args:
            app_id: OneSignal application ID. The client is inert without it.
            api_key: OneSignal REST API key. The client is inert without it.
            api_url: Notifications endpoint.
            timeout: HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
            max_retries: Retries after the first attempt on transient failures.
            backoff_initial: First backoff delay in seconds.
            backoff_factor: Multiplier applied per retry.
            backoff_max: Upper bound for a single backoff delay.
        """
        self.app_id = app_id
        self.api_key = api_key
        self.api_url = api_url
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._max_retries = max_retries
        self._backoff_initial = backoff_initial
        self._backoff_factor = backoff_factor
        self._backoff_max = backoff_max

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def backoff_delay(self, attempt: int) -> float:
        return min(self._backoff_initial * (self._backoff_factor**attempt), self._backoff_max)

    def build_payload(
        self,
        *,
        title: str,
        message: str,
        external_user_ids: Optional[List[str]] = None,
        player_ids: Optional[List[str]] = None,
        data: Optional[Dict[str, Any]] = None,
        url: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "app_id": self.app_id,
            "headings": {"en": title},
            "contents": {"en": message},
            "data": data or {},
        }
        if url:
            payload["url"] = url
        if external_user_ids:
            payload["include_external_user_ids"] = list(external_user_ids)
        else:
            payload["include_player_ids"] = list(player_ids or [])
        return payload

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._get_client().post(
                self.api_url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Basic {self.api_key}",
                },
            )
        except httpx.HTTPError as e:
            raise PushDeliveryError(f"OneSignal request failed: {e}") from e

        if response.status_code >= 400:
            try:
                details: Any = response.json()
            except ValueError:
                details = response.text
            raise PushDeliveryError(
                f"OneSignal returned HTTP {response.status_code}",
                status_code=response.status_code,
                details=details,
            )
        try:
            return response.json()
        except ValueError:
            return {}

    async def send(
        self,
        *,
        title: str,
        message: str,
        external_user_ids: Optional[List[str]] = None,
        player_ids: Optional[List[str]] = None,
        data: Optional[Dict[str, Any]] = None,
        url: Optional[str] = None,
    ) -> bool:
        """Deliver a push notification.

        Returns:
            True when OneSignal accepted the notification; False when the client
            is not configured, there are no recipients, or delivery failed.
        """
        if not self.configured:
            logger.debug("OneSignal is not configured; skipping push")
            return False
        if not external_user_ids and not player_ids:
            logger.debug("No push recipients; skipping push")
            return False

        payload = self.build_payload(
            title=title,
            message=message,
            external_user_ids=external_user_ids,
            player_ids=player_ids,
            data=data,
            url=url,
        )

        retries = 0
        while True:
            try:
                body = await self._post(payload)
                logger.debug(f"OneSignal accepted push: id={body.get('id')}")
                return True
            except PushDeliveryError as e:
                if not e.retryable or retries >= self._max_retries:
                    logger.warning(f"Push delivery failed: {e} (status={e.status_code}, details={e.details})")
                    return False
                sleep_s = self.backoff_delay(retries)
                logger.warning(
                    "Push delivery error; retrying in %ss (attempt %s/%s): %s",
                    sleep_s,
                    retries + 1,
                    self._max_retries,
                    e,
                )
                retries += 1
                await asyncio.sleep(sleep_s)


_push_client: Optional[OneSignalClient] = None


def get_push_client() -> OneSignalClient:
    """Return the process-wide OneSignal client built from settings."""
    global _push_client
    if _push_client is None:
        config = settings.onesignal
        _push_client = OneSignalClient(
            config.app_id,
            config.api_key,
            api_url=config.api_url,
            max_retries=config.max_retries,
        )
    return _push_client


async def close_push_client() -> None:
    global _push_client
    if _push_client is not None:
        await _push_client.aclose()
        _push_client = None

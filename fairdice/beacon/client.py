"""
HTTP client for the randomness beacon.

Two calls, both bounded by ``BeaconConfig.timeout_s``:

- ``GET  {base}/v1/randomness/latest``  → :class:`LatestRoundPayload`
- ``POST {base}/v1/verify/{round}``     → ``{"valid": bool}``

Every failure that prevents a usable response (connect/read errors, timeouts,
non-2xx statuses, bodies that are not JSON or do not match the schema) is
raised as :class:`fairdice.errors.NetworkError`. The client never retries;
callers decide how to degrade.

Usage
-----
    async with BeaconClient(BeaconConfig()) as beacon:
        payload = await beacon.fetch_latest()
        ok = await beacon.verify_round(payload.round, payload.signature, payload.randomness)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from fairdice.beacon.schema import LatestRoundPayload, VerifyRequest, VerifyResponse
from fairdice.config import BeaconConfig
from fairdice.errors import NetworkError
from fairdice.metrics import METRICS, Metrics

logger = logging.getLogger(__name__)


def _build_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    hdrs = {
        "content-type": "application/json",
        "accept": "application/json",
    }
    if extra:
        hdrs.update(extra)
    return hdrs


class BeaconClient:
    """
    Minimal async client for the beacon API.

    An ``httpx.AsyncClient`` may be injected; otherwise one is created lazily
    and closed by :meth:`close`.
    """

    def __init__(
        self,
        config: Optional[BeaconConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        metrics: Metrics = METRICS,
    ) -> None:
        self._cfg = config or BeaconConfig()
        self._client = client
        self._own_client = client is None
        self._metrics = metrics

    @property
    def config(self) -> BeaconConfig:
        return self._cfg

    # ---------- lifecycle ----------

    async def start(self) -> None:
        self._http()

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._cfg.timeout_s,
                headers=_build_headers(self._cfg.headers),
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._own_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BeaconClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ---------- API ----------

    async def fetch_latest(self) -> LatestRoundPayload:
        url = self._cfg.latest_url()
        data = await self._request("latest", "GET", url)
        try:
            return LatestRoundPayload.model_validate(data)
        except ValidationError as e:
            logger.debug("latest round payload rejected: %s", e)
            raise NetworkError(url, "bad-payload") from e

    async def verify_round(self, round_id: int, signature: str, randomness: str) -> bool:
        """
        Ask the beacon whether (round, signature, randomness) is authentic.

        Returns the beacon's answer; anything but a literal JSON ``true`` under
        ``valid`` is a negative answer.
        """
        url = self._cfg.verify_url(round_id)
        body = VerifyRequest(signature=signature, randomness=randomness, round=int(round_id))
        data = await self._request("verify", "POST", url, json=body.model_dump())
        if not isinstance(data, dict):
            return False
        try:
            return VerifyResponse.model_validate(data).is_valid
        except ValidationError:
            return False

    # ---------- internals ----------

    async def _request(
        self,
        endpoint: str,
        method: str,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        http = self._http()
        try:
            with self._metrics.beacon_timer(endpoint):
                resp = await asyncio.wait_for(
                    http.request(method, url, json=json),
                    timeout=self._cfg.timeout_s,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise NetworkError(url, "timeout") from e
        except httpx.HTTPError as e:
            raise NetworkError(url, f"transport: {e.__class__.__name__}") from e

        if not resp.is_success:
            raise NetworkError(url, f"http-{resp.status_code}", resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(url, "not-json", resp.status_code) from e


__all__ = ["BeaconClient"]

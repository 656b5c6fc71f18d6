"""Client for the public CoinGecko API.

Every call opens its own ``httpx.AsyncClient`` and reaches upstream; nothing is
cached. Transport failures (connection errors, timeouts) are retried a bounded
number of times with a fixed delay. HTTP error statuses are never retried and
surface as ``NotFoundError`` (404) or ``UpstreamError`` (anything else).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from crypto_gateway.config.settings import Settings

logger = logging.getLogger("crypto_gateway.coingecko")


DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"

TOP_CRYPTOS_PARAMS: dict[str, Any] = {
    "vs_currency": "usd",
    "order": "market_cap_desc",
    "per_page": 10,
    "page": 1,
    "sparkline": "false",
}

COIN_DETAIL_PARAMS: dict[str, Any] = {
    "localization": "false",
    "tickers": "false",
    "market_data": "true",
    "community_data": "false",
    "developer_data": "false",
    "sparkline": "false",
}


class CoinGeckoError(Exception):
    """Base class for every failure raised by ``CoinGeckoClient``."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CoinGeckoError):
    def __init__(self, resource: str, message: str | None = None) -> None:
        super().__init__(message or f"'{resource}' not found")
        self.resource = resource


class UpstreamError(CoinGeckoError):
    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"CoinGecko responded with status {status_code}")
        self.status_code = status_code


class NetworkError(CoinGeckoError):
    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class CoinGeckoClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        max_attempts: int = 3,
        retry_delay: float = 0.1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "CoinGeckoClient":
        return cls(
            base_url=settings.COINGECKO_BASE_URL,
            timeout=settings.COINGECKO_TIMEOUT,
            max_attempts=settings.COINGECKO_MAX_ATTEMPTS,
            retry_delay=settings.COINGECKO_RETRY_DELAY_MS / 1000.0,
        )

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET ``path`` with bounded retries on transport failure only."""

        url = f"{self.base_url}/{path.lstrip('/')}"
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            while True:
                attempt += 1
                try:
                    return await client.get(url, params=params)
                except httpx.TransportError as exc:
                    if attempt >= self.max_attempts:
                        raise NetworkError(str(exc) or exc.__class__.__name__, attempts=attempt) from exc
                    logger.warning(
                        "coingecko request failed | path=%s | attempt=%s/%s | err=%r | sleep=%.3fs",
                        path,
                        attempt,
                        self.max_attempts,
                        exc,
                        self.retry_delay,
                    )
                    await asyncio.sleep(self.retry_delay)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                response.status_code,
                f"CoinGecko returned an invalid JSON body (status {response.status_code})",
            ) from exc

    async def get_top_cryptos(self) -> list[dict[str, Any]]:
        """Top 10 coins by market cap, in upstream order."""

        try:
            response = await self._get("coins/markets", params=TOP_CRYPTOS_PARAMS)
        except NetworkError as exc:
            logger.error("coingecko unreachable | op=top_cryptos | attempts=%s", exc.attempts)
            raise NetworkError(
                f"Network error while fetching cryptocurrencies: {exc.message}", attempts=exc.attempts
            ) from exc

        if response.status_code == 404:
            raise NotFoundError("coins/markets", "CoinGecko API endpoint not found")
        if response.is_error:
            raise UpstreamError(
                response.status_code,
                f"Failed to fetch cryptocurrencies from CoinGecko: {response.status_code}",
            )

        return self._json(response) or []

    async def get_crypto_by_id(self, coin_id: str) -> dict[str, Any]:
        """Full detail (with market data) for a single coin."""

        try:
            response = await self._get(f"coins/{coin_id}", params=COIN_DETAIL_PARAMS)
        except NetworkError as exc:
            logger.error("coingecko unreachable | op=crypto_by_id | id=%s | attempts=%s", coin_id, exc.attempts)
            raise NetworkError(
                f"Network error while fetching crypto '{coin_id}': {exc.message}", attempts=exc.attempts
            ) from exc

        if response.status_code == 404:
            raise NotFoundError(coin_id, f"Cryptocurrency '{coin_id}' not found")
        if response.is_error:
            raise UpstreamError(
                response.status_code,
                f"Failed to fetch crypto details for '{coin_id}': {response.status_code}",
            )

        return self._json(response) or {}

    async def search_crypto(self, query: str) -> list[dict[str, Any]]:
        """
        Coins matching ``query`` by name or symbol.

        The upstream search also returns exchanges, categories and NFTs; only the
        ``coins`` collection is kept.
        """

        try:
            response = await self._get("search", params={"query": query})
        except NetworkError as exc:
            logger.error("coingecko unreachable | op=search | query=%r | attempts=%s", query, exc.attempts)
            raise NetworkError(
                f"Network error while searching cryptocurrencies: {exc.message}", attempts=exc.attempts
            ) from exc

        if response.status_code == 404:
            raise NotFoundError("search", "CoinGecko search endpoint not found")
        if response.is_error:
            raise UpstreamError(
                response.status_code,
                f"Failed to search cryptocurrencies: {response.status_code}",
            )

        data = self._json(response)
        if not isinstance(data, dict):
            return []
        return data.get("coins") or []

    async def ping(self) -> dict[str, Any]:
        response = await self._get("ping")
        if response.is_error:
            raise UpstreamError(response.status_code)
        return self._json(response) or {}

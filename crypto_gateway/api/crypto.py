# crypto_gateway/api/crypto.py
from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from crypto_gateway.config.settings import get_settings
from crypto_gateway.schemas.crypto import (
    CryptoDetailResponse,
    ErrorResponse,
    SearchQuery,
    SearchResponse,
    TopCryptosResponse,
    ValidationErrorResponse,
)
from crypto_gateway.services.coingecko import CoinGeckoClient, CoinGeckoError, NotFoundError

logger = logging.getLogger("crypto_gateway.api")

router = APIRouter(tags=["crypto"])


def get_coingecko_client() -> CoinGeckoClient:
    return CoinGeckoClient.from_settings(get_settings())


def _format_trace(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _error_response(
    *,
    message: str,
    exc: CoinGeckoError,
    status_code: int = 503,
    with_trace: bool = False,
) -> JSONResponse:
    # diagnostic detail only leaves the process in debug mode
    error = None
    if get_settings().APP_DEBUG:
        error = _format_trace(exc) if with_trace else exc.message
    payload: dict[str, Any] = {
        "success": False,
        "message": message,
        "error": error,
    }
    return JSONResponse(status_code=status_code, content=payload)


def _validation_response(exc: ValidationError, message: str) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "__root__"
        errors.setdefault(field, []).append(err["msg"])
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message, "errors": errors},
    )


# Success bodies are upstream JSON passed through untouched; the models below
# only document them in OpenAPI.


@router.get(
    "/top-cryptos",
    response_model=None,
    responses={200: {"model": TopCryptosResponse}, 503: {"model": ErrorResponse}},
)
async def top_cryptos(client: CoinGeckoClient = Depends(get_coingecko_client)):
    """
    Top 10 cryptocurrencies by market cap, in upstream order.
    Example: /api/top-cryptos
    """
    try:
        cryptos = await client.get_top_cryptos()
    except CoinGeckoError as exc:
        logger.warning("top-cryptos failed | err=%s", exc.message)
        return _error_response(message="Failed to fetch cryptocurrencies", exc=exc)

    return JSONResponse(content={"success": True, "data": cryptos})


@router.get(
    "/crypto/{coin_id}",
    response_model=None,
    responses={
        200: {"model": CryptoDetailResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def crypto_detail(coin_id: str, client: CoinGeckoClient = Depends(get_coingecko_client)):
    """
    Detail for a single coin (description, links, USD-keyed market data).
    Example: /api/crypto/bitcoin
    """
    try:
        crypto = await client.get_crypto_by_id(coin_id)
    except NotFoundError as exc:
        logger.info("crypto not found | id=%s", coin_id)
        return _error_response(message=exc.message, exc=exc, status_code=404, with_trace=True)
    except CoinGeckoError as exc:
        logger.warning("crypto detail failed | id=%s | err=%s", coin_id, exc.message)
        return _error_response(message=exc.message, exc=exc, with_trace=True)

    return JSONResponse(content={"success": True, "data": crypto})


@router.get(
    "/search",
    response_model=None,
    responses={
        200: {"model": SearchResponse},
        422: {"model": ValidationErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def search(query: str | None = None, client: CoinGeckoClient = Depends(get_coingecko_client)):
    """
    Search coins by name or symbol; ``query`` is trimmed, then must be 1-100 characters.
    Example: /api/search?query=btc
    """
    try:
        validated = SearchQuery.model_validate({} if query is None else {"query": query})
    except ValidationError as exc:
        return _validation_response(exc, "Invalid search query")

    try:
        results = await client.search_crypto(validated.query)
    except CoinGeckoError as exc:
        logger.warning("search failed | query=%r | err=%s", validated.query, exc.message)
        return _error_response(message="Failed to search cryptocurrencies", exc=exc)

    return JSONResponse(content={"success": True, "data": results, "query": validated.query})

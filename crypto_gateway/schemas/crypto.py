from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class CoinSummary(BaseModel):
    """One row of ``coins/markets``; unknown upstream fields are passed through."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    symbol: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    current_price: Optional[Number] = None
    market_cap: Optional[Number] = None
    market_cap_rank: Optional[int] = None
    price_change_percentage_24h: Optional[Number] = None
    total_volume: Optional[Number] = None
    high_24h: Optional[Number] = None
    low_24h: Optional[Number] = None


class CoinDetail(BaseModel):
    """``coins/{id}`` payload; market data is keyed by currency (``current_price.usd``)."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    symbol: Optional[str] = None
    name: Optional[str] = None
    market_cap_rank: Optional[int] = None
    description: Optional[Dict[str, Any]] = None
    image: Optional[Dict[str, Any]] = None
    market_data: Optional[Dict[str, Any]] = None
    links: Optional[Dict[str, Any]] = None


class SearchResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    symbol: Optional[str] = None
    thumb: Optional[str] = None
    market_cap_rank: Optional[int] = None


class SearchQuery(BaseModel):
    """Validated ``/api/search`` input; surrounding whitespace is stripped first."""

    model_config = ConfigDict(str_strip_whitespace=True)

    query: str = Field(..., min_length=1, max_length=100)


# Envelopes. Success bodies carry no ``message``/``error`` keys at all.


class TopCryptosResponse(BaseModel):
    success: bool = True
    data: List[CoinSummary]


class CryptoDetailResponse(BaseModel):
    success: bool = True
    data: CoinDetail


class SearchResponse(BaseModel):
    success: bool = True
    data: List[SearchResult]
    query: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None


class ValidationErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Dict[str, List[str]]

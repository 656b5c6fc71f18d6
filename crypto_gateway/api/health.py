# crypto_gateway/api/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response

from crypto_gateway.api.crypto import get_coingecko_client
from crypto_gateway.services.coingecko import CoinGeckoClient, CoinGeckoError

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "now_unix": int(now_ts),
        "now_iso": now_dt.isoformat().replace("+00:00", "Z"),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


async def _check_coingecko(client: CoinGeckoClient) -> Dict[str, Any]:
    t0 = time.time()
    try:
        await client.ping()
        return {"ok": True, "latency_ms": int((time.time() - t0) * 1000)}
    except CoinGeckoError as e:
        return {
            "ok": False,
            "latency_ms": int((time.time() - t0) * 1000),
            "error": e.message,
        }


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/ready")
async def ready(response: Response, client: CoinGeckoClient = Depends(get_coingecko_client)):
    payload: Dict[str, Any] = {"status": "ok", **_now_meta()}
    checks = {"coingecko": await _check_coingecko(client)}

    degraded_reasons = []
    if not checks["coingecko"]["ok"]:
        degraded_reasons.append("coingecko_unreachable")

    if degraded_reasons:
        payload["status"] = "degraded"
        response.status_code = 503

    payload["degraded"] = bool(degraded_reasons)
    payload["degraded_reasons"] = degraded_reasons
    payload["checks"] = checks
    return payload


@router.get("/health")
async def health(response: Response, client: CoinGeckoClient = Depends(get_coingecko_client)):
    # Deep health == readiness here
    return await ready(response, client)

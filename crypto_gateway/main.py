# crypto_gateway/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crypto_gateway.api.crypto import router as crypto_router
from crypto_gateway.api.health import router as health_router
from crypto_gateway.config.settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s | %(message)s",
)
logger = logging.getLogger("crypto_gateway")

app = FastAPI(title="Crypto Gateway API", debug=settings.APP_DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Routers
app.include_router(health_router)
app.include_router(crypto_router, prefix="/api")


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Crypto Gateway API"}


if __name__ == "__main__":
    import uvicorn

    logger.info("starting | upstream=%s | debug=%s", settings.COINGECKO_BASE_URL, settings.APP_DEBUG)
    uvicorn.run("crypto_gateway.main:app", host="0.0.0.0", port=8000)

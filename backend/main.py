import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import checkout_router, orders_router
from config import settings

logger = logging.getLogger("uniform-orders")

app = FastAPI(title="Uniform Orders API")

allow_origins = settings.allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkout_router)
app.include_router(orders_router)


@app.on_event("startup")
async def _on_startup() -> None:
    if allow_origins == ["*"]:
        logger.warning(
            "CORS allows all origins with credentials; set ALLOWED_ORIGINS to the store front-end origins."
        )


@app.middleware("http")
async def log_preflight(request, call_next):
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "")
        logger.info("CORS preflight %s %s origin=%s", request.method, request.url.path, origin)
    return await call_next(request)


@app.get("/api/health")
async def health():
    return {"status": "ok", "stock_lookup_timeout_seconds": settings.stock_lookup_timeout_seconds}

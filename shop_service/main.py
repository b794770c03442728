# shop_service/main.py
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shop_service.config import Settings
from shop_service.db.database import build_engine, build_sessionmaker
from shop_service.db.init_db import init_db
from shop_service.errors import ShopError
from shop_service.log import configure_logging
from shop_service.notifications import NotificationDispatcher, NotificationGateway, build_gateway
from shop_service.routes import admin, cart, catalog, orders, reviews

logger = structlog.get_logger(__name__)


async def shop_error_handler(request: Request, exc: ShopError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid input")
    return JSONResponse(status_code=400, content={"error": f"{where}: {message}" if where else message})


def create_app(settings: Optional[Settings] = None, gateway: Optional[NotificationGateway] = None) -> FastAPI:
    """Build the API. The engine, session factory and notifier are made in the lifespan
    and kept on app.state; nothing here is process-global.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings)
        await init_db(engine, seed=settings.seed_demo)
        client = httpx.AsyncClient(timeout=settings.notify_timeout)

        app.state.engine = engine
        app.state.sessionmaker = build_sessionmaker(engine)
        app.state.dispatcher = NotificationDispatcher(
            gateway or build_gateway(settings, client),
            timeout=settings.notify_timeout,
        )
        logger.info(
            "shop_service_started",
            database=engine.url.render_as_string(hide_password=True),
            notifier=type(app.state.dispatcher.gateway).__name__,
            admin_auth=bool(settings.admin_secret),
        )
        yield

        await app.state.dispatcher.drain()
        await client.aclose()
        await engine.dispose()

    app = FastAPI(title="ZEN Shop API", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ShopError, shop_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(catalog.products_router)
    app.include_router(catalog.stores_router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(reviews.router)
    app.include_router(admin.router)

    @app.get("/api/health")
    async def api_health():
        return {"ok": True}

    @app.get("/")
    async def health_check():
        """Health check endpoint."""
        return {"status": "shop_service running"}

    return app


if __name__ == "__main__":
    import uvicorn

    # same as: uvicorn shop_service.main:create_app --factory
    uvicorn.run("shop_service.main:create_app", factory=True, host="0.0.0.0", port=8000)

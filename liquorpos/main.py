import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from liquorpos.api.errors import register_error_handlers
from liquorpos.api.routes.auth import router as auth_router
from liquorpos.api.routes.inventory import router as inventory_router
from liquorpos.api.routes.pos import router as pos_router
from liquorpos.api.routes.reports import router as reports_router
from liquorpos.api.routes.sales import router as sales_router
from liquorpos.api.routes.settings import router as settings_router
from liquorpos.core.config import settings
from liquorpos.core.logging import configure_logging
from liquorpos.db.database import Base, SessionLocal, engine
from liquorpos.services.cache import StoreCache
from liquorpos.services.cart import CartRegistry
from liquorpos.services.seed import seed_database

logger = logging.getLogger(__name__)


def _prepare_database() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_database(db)
    finally:
        db.close()


def create_app(seed: bool | None = None) -> FastAPI:
    should_seed = settings.seed_on_startup if seed is None else seed

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        configure_logging(settings.log_level)
        if should_seed:
            _prepare_database()
        logger.info("%s started", settings.app_name)
        yield
        logger.info("%s stopped", settings.app_name)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.cache = StoreCache()
    app.state.carts = CartRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(inventory_router)
    app.include_router(pos_router)
    app.include_router(sales_router)
    app.include_router(reports_router)
    app.include_router(settings_router)

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()

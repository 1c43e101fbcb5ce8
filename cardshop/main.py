import logging
import sys
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardshop.config import Settings, settings as default_settings
from cardshop.database import build_engine, build_session_factory, create_tables
from cardshop.infrastructure.http_clients import ScryfallCatalogClient
from cardshop.presentation.api import router
from cardshop.presentation.errors import register_exception_handlers

logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    settings: Settings = app.state.settings
    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD не задан: вход администратора отключен")

    # 1. Пул соединений: один на процесс, use cases получают его через app.state
    engine = build_engine(settings.DATABASE_URL)
    app.state.session_factory = build_session_factory(engine)

    # 2. Создаем таблицы
    if settings.CREATE_TABLES:
        await create_tables(engine)
        logger.info("Таблицы проверены")

    yield

    logger.info("Приложение останавливается...")
    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(
        title="Card Shop",
        description="Склад и заказы магазина коллекционных карт",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.catalog = ScryfallCatalogClient(settings.SCRYFALL_BASE_URL, settings.SCRYFALL_TIMEOUT)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"]
    )
    register_exception_handlers(app)
    app.include_router(router, prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cardshop.main:app", host="0.0.0.0", port=default_settings.API_PORT)

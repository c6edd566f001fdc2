from contextlib import asynccontextmanager
from fastapi import FastAPI
from src.database.core import create_tables
from src.entities.product import Product  # Import models to register them
from src.entities.user import User  # Import models to register them
from src.entities.order import Order  # Import models to register them
from src.api import register_routes
from src.config import settings
from src.exceptions.handlers import register_exception_handlers
from src.utils.cache import CacheStore

from src.logging import configure_logging

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One cache per process, alive until shutdown
    app.state.cache = CacheStore()
    await create_tables()
    yield


app = FastAPI(lifespan=lifespan)

register_exception_handlers(app)
register_routes(app)

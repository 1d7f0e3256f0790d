from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.api.v1 import routers
from app.api.error_handlers import register_error_handlers
from app.core.config import settings
import logging
from app.db.session import connect_db_pool, close_db_pool

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_db_pool()
    yield
    await close_db_pool()

app = FastAPI(
    title="Bank Cards API",
    description="Card lifecycle management and transfers between a user's own cards",
    version="1.0.0",
    lifespan=lifespan
)

register_error_handlers(app)
app.include_router(routers.router)

@app.get("/")
async def root():
    return {"message": "Welcome to Bank Cards API"}

import os
import asyncio
from prometheus_client import Counter, start_http_server
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
import logging

from .storage import MongoStore

logger = logging.getLogger(__name__)

MONGO_URL = os.getenv('MONGO_URL', 'mongodb://mongo:27017')
MONGO_DB = os.getenv('MONGO_DB', 'blog')
METRICS_PORT = int(os.getenv('METRICS_PORT', '8001'))

MONGO = None
STORE = None

AUTH_ATTEMPTS = Counter('blog_auth_attempts_total', 'Signup and signin attempts', ['mode', 'outcome'])
POST_WRITES = Counter('blog_post_writes_total', 'Successful post mutations', ['operation'])


def init_metrics(port: int = METRICS_PORT):
    """Initialize Prometheus metrics server"""
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except OSError as e:
        logger.warning(f'Prometheus start failed: {e}')


def _connect() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        MONGO_URL,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=5000,
        socketTimeoutMS=5000,
        maxPoolSize=50,
        retryWrites=True,
        retryReads=True,
        tz_aware=True,
    )


def get_store() -> MongoStore:
    """FastAPI dependency returning the shared store, connecting on first use"""
    global MONGO, STORE
    if STORE is None:
        if MONGO is None:
            MONGO = _connect()
        STORE = MongoStore(MONGO[MONGO_DB])
    return STORE


async def mongo_startup():
    """Open the MongoDB connection, check it and create indexes"""
    max_retries = 3
    retry_delay = 3  # seconds

    store = get_store()
    for attempt in range(max_retries):
        try:
            logger.info(f"Attempting to connect to MongoDB: {MONGO_URL} (attempt {attempt + 1}/{max_retries})")
            await store.ping()
            await store.ensure_indexes()
            logger.info("MongoDB connected successfully")
            return
        except PyMongoError as e:
            logger.warning(f'MongoDB startup attempt {attempt + 1} failed: {e}')
            if attempt < max_retries - 1:
                logger.info(f"Retrying MongoDB connection in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
    logger.error("Failed to connect to MongoDB after all retries")


async def shutdown_connections():
    """Gracefully shutdown all connections"""
    global MONGO, STORE
    logger.info("Shutting down connections...")

    if MONGO:
        MONGO.close()
        logger.info("MongoDB connection closed")
    MONGO = None
    STORE = None

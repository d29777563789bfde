"""
Database connection and initialization
"""
import logging
from motor.motor_asyncio import AsyncIOMotorClient

from .config import MONGO_URL, DB_NAME, WEDDING_COLLECTION, RSVP_COLLECTION

logger = logging.getLogger(__name__)

# Optimized MongoDB connection with connection pooling
client = AsyncIOMotorClient(
    MONGO_URL,
    maxPoolSize=100,
    minPoolSize=10,
    maxIdleTimeMS=30000,
    connectTimeoutMS=5000,
    serverSelectionTimeoutMS=5000,
    waitQueueTimeoutMS=10000
)

db = client[DB_NAME]


async def create_database_indexes(database=None):
    """Create necessary indexes for optimal query performance"""
    database = database if database is not None else db
    logger.info("Creating database indexes...")

    try:
        # Wedding microsites are addressed by their own id
        await database[WEDDING_COLLECTION].create_index("id", unique=True)

        # RSVP responses are listed per wedding, newest first
        await database[RSVP_COLLECTION].create_index("id", unique=True)
        await database[RSVP_COLLECTION].create_index([("userId", 1), ("createdAt", -1)])

        logger.info("Database indexes created successfully")
    except Exception as e:
        logger.error(f"Error creating indexes (may already exist): {e}")

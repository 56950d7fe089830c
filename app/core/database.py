import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from app.core.config import MONGODB_URL, DATABASE_NAME

logger = logging.getLogger(__name__)


class MongoDB:
    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None

    async def connect(self):
        self.client = AsyncIOMotorClient(MONGODB_URL)
        logger.info(f"Connected to MongoDB database '{DATABASE_NAME}'")

    async def disconnect(self):
        if self.client:
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")

    def get_database(self) -> AsyncIOMotorDatabase:
        if self.client is None:
            raise RuntimeError("MongoDB client not initialized. Call connect() first.")
        return self.client[DATABASE_NAME]


mongodb = MongoDB()

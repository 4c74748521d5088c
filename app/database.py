from motor.motor_asyncio import AsyncIOMotorClient
from loguru import logger

from app.config import MONGO_URI, DATABASE_NAME

client = None
db = None


async def connect_to_mongo():
    global client, db

    if not MONGO_URI:
        raise ValueError("MONGO_URI environment variable is not set! Check your .env file.")

    if "localhost" in MONGO_URI or "127.0.0.1" in MONGO_URI:
        logger.warning("Connecting to a LOCAL MongoDB instance")

    client = AsyncIOMotorClient(MONGO_URI)
    db = client[DATABASE_NAME]
    await client.admin.command('ping')

    logger.info(f"Connected to MongoDB database '{DATABASE_NAME}'")


async def close_mongo_connection():
    if client:
        client.close()
        logger.info("MongoDB connection closed")


def get_db():
    if db is None:
        raise RuntimeError("Database is not connected. Call connect_to_mongo() first.")
    return db

from bson import ObjectId
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient
from core import config

def default_id():
    return str(ObjectId())

# Game sessions are listed by their parent tournament
async def create_indexes():
    await db.documents.create_index("parent")
    await db.documents.create_index("kind")

# Initialize the database connection
client = None
db = None

def initialize_db_connection():
    global client, db
    client = AsyncIOMotorClient(config.MONGODB_URL)
    db = client[config.DATABASE_NAME]
    logger.info(f"Database connection initialized ({config.DATABASE_NAME}).")

def close_db_connection():
    global client, db
    if client is not None:
        client.close()
    client = None
    db = None

def get_db():
    return db

import logging
from typing import Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


def to_object_id(user_id: str) -> Optional[ObjectId]:
    # Ids that are not valid ObjectIds can never match a stored user
    if not isinstance(user_id, str):
        return None
    try:
        return ObjectId(user_id)
    except InvalidId:
        return None


class UserStore:
    """
    Persistence handle for the users collection.

    Every method issues exactly one call against the collection. Errors from
    the driver (including DuplicateKeyError for a reused email) propagate to
    the caller.
    """

    def __init__(self, collection: AsyncIOMotorCollection, client: Optional[AsyncIOMotorClient] = None):
        self.collection = collection
        self.client = client

    async def ensure_indexes(self) -> None:
        # Email uniqueness is enforced by the database, not by validation
        await self.collection.create_index("email", unique=True)

    async def find_all(self) -> List[Dict]:
        return await self.collection.find().to_list(length=None)

    async def insert(self, user: Dict) -> Dict:
        document = dict(user)
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def find_by_id_and_replace(self, user_id: str, user: Dict) -> Optional[Dict]:
        object_id = to_object_id(user_id)
        if object_id is None:
            return None
        return await self.collection.find_one_and_replace(
            {"_id": object_id},
            dict(user),
            return_document=ReturnDocument.AFTER
        )

    async def find_by_id_and_delete(self, user_id: str) -> Optional[Dict]:
        object_id = to_object_id(user_id)
        if object_id is None:
            return None
        return await self.collection.find_one_and_delete({"_id": object_id})

    async def exists(self, user_id: str) -> bool:
        object_id = to_object_id(user_id)
        if object_id is None:
            return False
        return await self.collection.count_documents({"_id": object_id}, limit=1) > 0

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


async def connect_user_store(config) -> UserStore:
    """
    Create the MongoDB client and the users store.

    A database that cannot be reached is logged and the store is returned
    anyway, so the service keeps running and each request fails on its own.
    """
    # Initialize the AsyncIOMotorClient with the MongoDB URI from the config
    client = AsyncIOMotorClient(config.MONGO_URI)

    # Access the specified database and users collection
    database = client[config.MONGO_DB]
    store = UserStore(database.get_collection(config.MONGO_COLLECTION), client)

    try:
        await client.admin.command("ping")
        await store.ensure_indexes()
        logger.info("MongoDB connected")
    except PyMongoError as e:
        logger.error(f"MongoDB connection error: {e}")

    return store

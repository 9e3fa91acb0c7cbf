"""
MongoDB Connection Utility

MongoDB stores:
- Resume metadata (title, owner, where the PDF bytes live)
- Resume PDF bytes (GridFS bucket, unless filesystem storage is configured)
- Tracked job applications
"""
import gridfs
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from jobtracker.core.config import get_settings
from jobtracker.core.logger import get_logger

logger = get_logger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None

# Collection name constants (avoid typos)
COLLECTIONS = {
    "resumes": "resumes",
    "jobs": "jobs",
}

GRIDFS_BUCKET = "resume_files"


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the job tracker database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def get_gridfs() -> gridfs.GridFS:
    """GridFS bucket holding resume PDFs."""
    return gridfs.GridFS(get_mongo_db(), collection=GRIDFS_BUCKET)


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Owner lookups, newest first
    db[COLLECTIONS["resumes"]].create_index([("user", ASCENDING), ("createdAt", DESCENDING)])
    db[COLLECTIONS["jobs"]].create_index([("user", ASCENDING), ("date", DESCENDING)])
    db[COLLECTIONS["jobs"]].create_index([("user", ASCENDING), ("status", ASCENDING)])

    logger.info("MongoDB indexes created successfully")

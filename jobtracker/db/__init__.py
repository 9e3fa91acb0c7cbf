"""
Database module - MongoDB connection, collections and GridFS.
"""
from jobtracker.db.mongodb import get_mongo_db, get_collection, get_gridfs, test_mongo_connection

__all__ = [
    "get_mongo_db",
    "get_collection",
    "get_gridfs",
    "test_mongo_connection"
]

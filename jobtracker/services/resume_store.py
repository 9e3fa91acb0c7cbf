"""
Resume Store - PDF bytes plus metadata.

Bytes live in one of two blob backends:
1. GridFS bucket in MongoDB (default)
2. Files under the upload directory

The metadata document records which one via a tagged `storage` field
({"kind": ..., "ref": ...}). Older documents that carry `fileId` or
`path`/`filename` instead are resolved into the same shape on read, so
nothing outside this module branches on storage layout.

Ordering rules:
- store: bytes are durable before the metadata document is inserted
- delete: bytes first, then the document (orphaned bytes are logged, not fatal)
"""

import os
import tempfile
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

import gridfs
from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from jobtracker.core.config import get_settings
from jobtracker.core.errors import NotFound, StorageError
from jobtracker.core.logger import get_logger
from jobtracker.db.mongodb import COLLECTIONS, get_collection, get_gridfs
from jobtracker.schemas.schemas import Resume, StorageKind, StoredReference
from jobtracker.services.mongo_service import parse_object_id

logger = get_logger(__name__)


# ============================================================
# BLOB BACKENDS
# ============================================================

class FilesystemBlobStore:
    """PDFs as files under a single directory. `ref` is the file name."""

    kind = StorageKind.filesystem

    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def _path(self, ref: str) -> str:
        # refs are bare names we generated; refuse anything that escapes root
        name = os.path.basename(ref)
        if not name or name != ref:
            raise NotFound("Resume file not found")
        return os.path.join(self.root, name)

    def put(self, data: bytes, filename: str) -> str:
        ref = f"{uuid.uuid4().hex}.pdf"
        try:
            os.makedirs(self.root, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.root, suffix=".part")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self._path(ref))
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write resume file: {e}") from e
        return ref

    def get(self, ref: str) -> bytes:
        try:
            with open(self._path(ref), "rb") as f:
                return f.read()
        except FileNotFoundError:
            raise NotFound("Resume file not found")
        except OSError as e:
            raise StorageError(f"Failed to read resume file: {e}") from e

    def delete(self, ref: str) -> None:
        try:
            os.unlink(self._path(ref))
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to delete resume file: {e}") from e


class GridFSBlobStore:
    """PDFs in a GridFS bucket. `ref` is the GridFS file id as a string."""

    kind = StorageKind.gridfs

    def __init__(self, fs: gridfs.GridFS):
        self.fs = fs

    def put(self, data: bytes, filename: str) -> str:
        try:
            file_id = self.fs.put(data, filename=filename, contentType="application/pdf")
        except PyMongoError as e:
            raise StorageError(f"Failed to store resume in GridFS: {e}") from e
        return str(file_id)

    def get(self, ref: str) -> bytes:
        try:
            return self.fs.get(ObjectId(ref)).read()
        except (InvalidId, NoFile):
            raise NotFound("Resume file not found")
        except PyMongoError as e:
            raise StorageError(f"Failed to read resume from GridFS: {e}") from e

    def delete(self, ref: str) -> None:
        try:
            self.fs.delete(ObjectId(ref))
        except InvalidId:
            pass
        except PyMongoError as e:
            raise StorageError(f"Failed to delete resume from GridFS: {e}") from e


# ============================================================
# DOCUMENT <-> MODEL
# ============================================================

def resolve_storage(doc: dict) -> StoredReference:
    """Read the storage reference from any known document layout."""
    storage = doc.get("storage")
    if storage:
        return StoredReference(kind=storage["kind"], ref=storage["ref"])
    if doc.get("fileId"):
        return StoredReference(kind=StorageKind.gridfs, ref=str(doc["fileId"]))
    # Disk uploads kept the generated name in `filename` and a full `path`
    name = doc.get("filename") or os.path.basename(doc.get("path") or "")
    if name:
        return StoredReference(kind=StorageKind.filesystem, ref=name)
    raise StorageError(f"Resume {doc.get('_id')} has no stored file reference")


def owner_filter(owner_id: str):
    """Match owners stored as strings and, for older documents, as ObjectIds."""
    if ObjectId.is_valid(owner_id):
        return {"$in": [owner_id, ObjectId(owner_id)]}
    return owner_id


def resume_from_doc(doc: dict) -> Resume:
    original = doc.get("originalName") or ""
    return Resume(
        id=str(doc["_id"]),
        owner_id=str(doc["user"]),
        title=doc.get("title") or original,
        storage=resolve_storage(doc),
        original_filename=original,
        created_at=doc["createdAt"],
    )


# ============================================================
# RESUME STORE
# ============================================================

class ResumeStore:
    """
    Resume metadata in MongoDB, bytes in a blob backend.

    Every operation takes the authenticated owner id; a resume owned by
    anyone else is reported as NotFound.
    """

    def __init__(self, collection: Collection, backends: Dict[StorageKind, object], default_kind: StorageKind):
        if default_kind not in backends:
            raise ValueError(f"No backend configured for {default_kind.value}")
        self.collection = collection
        self.backends = backends
        self.default_kind = default_kind

    def _backend(self, kind: StorageKind):
        try:
            return self.backends[kind]
        except KeyError:
            raise StorageError(f"No backend configured for {kind.value}")

    def _find(self, owner_id: str, resume_id: str) -> dict:
        oid = parse_object_id(resume_id, "Resume not found")
        try:
            doc = self.collection.find_one({"_id": oid, "user": owner_filter(owner_id)})
        except PyMongoError as e:
            raise StorageError(f"Failed to load resume: {e}") from e
        if doc is None:
            raise NotFound("Resume not found")
        return doc

    def store(self, owner_id: str, data: bytes, title: Optional[str], original_filename: str) -> Resume:
        """Persist bytes, then the record. Returns the new resume."""
        backend = self._backend(self.default_kind)
        ref = backend.put(data, original_filename)

        doc = {
            "user": owner_id,
            "title": (title or "").strip() or original_filename,
            "originalName": original_filename,
            "storage": {"kind": self.default_kind.value, "ref": ref},
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            try:
                backend.delete(ref)
            except StorageError:
                logger.warning("Orphaned %s blob %s after failed insert", self.default_kind.value, ref)
            raise StorageError(f"Failed to save resume record: {e}") from e

        doc["_id"] = result.inserted_id
        logger.info("Stored resume %s for user %s (%s)", result.inserted_id, owner_id, self.default_kind.value)
        return resume_from_doc(doc)

    def get(self, owner_id: str, resume_id: str) -> Resume:
        return resume_from_doc(self._find(owner_id, resume_id))

    def list(self, owner_id: str) -> List[Resume]:
        """All resumes for one user, newest first."""
        try:
            docs = list(self.collection.find({"user": owner_filter(owner_id)}).sort("createdAt", -1))
        except PyMongoError as e:
            raise StorageError(f"Failed to list resumes: {e}") from e
        return [resume_from_doc(doc) for doc in docs]

    def fetch(self, owner_id: str, resume_id: str) -> bytes:
        """PDF bytes of an owned resume."""
        resume = self.get(owner_id, resume_id)
        return self._backend(resume.storage.kind).get(resume.storage.ref)

    def delete(self, owner_id: str, resume_id: str) -> None:
        resume = self.get(owner_id, resume_id)
        try:
            self._backend(resume.storage.kind).delete(resume.storage.ref)
        except StorageError as e:
            logger.warning("Could not delete bytes for resume %s, leaving orphan: %s", resume_id, e)

        try:
            result = self.collection.delete_one({"_id": ObjectId(resume.id), "user": owner_filter(owner_id)})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete resume record: {e}") from e
        if result.deleted_count == 0:
            raise NotFound("Resume not found")
        logger.info("Deleted resume %s for user %s", resume_id, owner_id)


# Singleton instance
_resume_store: ResumeStore = None


def get_resume_store() -> ResumeStore:
    """Get or create the resume store (singleton pattern)"""
    global _resume_store
    if _resume_store is None:
        settings = get_settings()
        _resume_store = ResumeStore(
            collection=get_collection(COLLECTIONS["resumes"]),
            backends={
                StorageKind.gridfs: GridFSBlobStore(get_gridfs()),
                StorageKind.filesystem: FilesystemBlobStore(settings.upload_dir),
            },
            default_kind=StorageKind(settings.resume_storage)
        )
    return _resume_store

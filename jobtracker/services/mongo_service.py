"""
MongoDB Service - CRUD operations for tracked job applications.

Collection: jobs
Each document belongs to one user (`user` field) and is never visible
to anyone else.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from jobtracker.core.errors import NotFound, StorageError
from jobtracker.db.mongodb import get_collection, COLLECTIONS
from jobtracker.schemas.schemas import JobCreate, JobResponse, JobStatus, JobUpdate


# ============================================================
# HELPERS
# ============================================================

def parse_object_id(value: str, not_found_message: str) -> ObjectId:
    """Malformed ids are reported exactly like unknown ones."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFound(not_found_message)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Python field name -> document field name
JOB_FIELDS = {
    "company": "company",
    "title": "title",
    "status": "status",
    "date": "date",
    "resume_used": "resumeUsed",
    "notes": "notes",
    "job_description": "jobDescription",
}


def job_from_doc(doc: dict) -> JobResponse:
    return JobResponse(
        id=str(doc["_id"]),
        owner_id=str(doc["user"]),
        company=doc["company"],
        title=doc["title"],
        status=doc.get("status", JobStatus.applied.value),
        date=doc["date"],
        resume_used=doc.get("resumeUsed"),
        notes=doc.get("notes"),
        job_description=doc.get("jobDescription"),
        status_changed_at=doc.get("statusChangedAt"),
        created_at=doc.get("createdAt") or doc["date"],
        updated_at=doc.get("updatedAt") or doc.get("createdAt") or doc["date"],
    )


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobApplicationService:
    """
    Handles job application storage.
    """

    def __init__(self, collection: Optional[Collection] = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["jobs"])

    def _query(self, owner_id: str, job_id: str) -> dict:
        return {"_id": parse_object_id(job_id, "Job not found"), "user": owner_id}

    def list(self, owner_id: str, status: Optional[JobStatus] = None) -> List[JobResponse]:
        """All jobs for a user, most recent application date first."""
        query: Dict[str, Any] = {"user": owner_id}
        if status is not None:
            query["status"] = status.value
        try:
            docs = list(self.collection.find(query).sort("date", -1))
        except PyMongoError as e:
            raise StorageError(f"Failed to list jobs: {e}") from e
        return [job_from_doc(doc) for doc in docs]

    def create(self, owner_id: str, data: JobCreate) -> JobResponse:
        now = utcnow()
        doc = {
            "user": owner_id,
            "company": data.company,
            "title": data.title,
            "status": data.status.value,
            "date": data.date or now,
            "resumeUsed": data.resume_used,
            "notes": data.notes,
            "jobDescription": data.job_description,
            "statusChangedAt": None,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            raise StorageError(f"Failed to save job: {e}") from e
        doc["_id"] = result.inserted_id
        return job_from_doc(doc)

    def get(self, owner_id: str, job_id: str) -> JobResponse:
        try:
            doc = self.collection.find_one(self._query(owner_id, job_id))
        except PyMongoError as e:
            raise StorageError(f"Failed to load job: {e}") from e
        if doc is None:
            raise NotFound("Job not found")
        return job_from_doc(doc)

    def update(self, owner_id: str, job_id: str, changes: JobUpdate) -> JobResponse:
        """
        Partial update: only fields present in the request are written.
        A status change stamps statusChangedAt.
        """
        current = self.get(owner_id, job_id)
        now = utcnow()

        updates: Dict[str, Any] = {"updatedAt": now}
        for field in changes.model_fields_set:
            value = getattr(changes, field)
            if field in ("company", "title", "status", "date") and value is None:
                continue
            if isinstance(value, JobStatus):
                value = value.value
            updates[JOB_FIELDS[field]] = value

        if "status" in updates and updates["status"] != current.status.value:
            updates["statusChangedAt"] = now

        try:
            doc = self.collection.find_one_and_update(
                self._query(owner_id, job_id),
                {"$set": updates},
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to update job: {e}") from e
        if doc is None:
            raise NotFound("Job not found")
        return job_from_doc(doc)

    def delete(self, owner_id: str, job_id: str) -> None:
        try:
            result = self.collection.delete_one(self._query(owner_id, job_id))
        except PyMongoError as e:
            raise StorageError(f"Failed to delete job: {e}") from e
        if result.deleted_count == 0:
            raise NotFound("Job not found")

    def status_counts(self, owner_id: str) -> Dict[str, int]:
        """Number of jobs per status, every status present."""
        counts = {status.value: 0 for status in JobStatus}
        try:
            rows = self.collection.aggregate([
                {"$match": {"user": owner_id}},
                {"$group": {"_id": "$status", "count": {"$sum": 1}}}
            ])
            for row in rows:
                if row["_id"] in counts:
                    counts[row["_id"]] = row["count"]
        except PyMongoError as e:
            raise StorageError(f"Failed to count jobs: {e}") from e
        return counts


# Singleton instance
_job_service: JobApplicationService = None


def get_job_service() -> JobApplicationService:
    """Get or create job service (singleton pattern)"""
    global _job_service
    if _job_service is None:
        _job_service = JobApplicationService()
    return _job_service

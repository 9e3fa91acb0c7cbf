"""Shared fixtures: in-memory MongoDB, fake GridFS, stub completion API, PDF builder."""

from types import SimpleNamespace

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from gridfs.errors import NoFile

from jobtracker.core.auth import create_access_token
from jobtracker.main import app
from jobtracker.schemas.schemas import StorageKind
from jobtracker.services.mongo_service import JobApplicationService, get_job_service
from jobtracker.services.openai_client import AnalysisClient, ModelAttempt
from jobtracker.services.resume_analyzer import ResumeAnalyzer, get_resume_analyzer
from jobtracker.services.resume_store import (
    FilesystemBlobStore, GridFSBlobStore, ResumeStore, get_resume_store
)

PRIMARY_MODEL = "primary-model"
FALLBACK_MODEL = "fallback-model"


def make_pdf(text: str) -> bytes:
    """Single-page PDF with `text` on one line in Helvetica."""
    escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
    stream = f"BT /F1 10 Tf 20 700 Td ({escaped}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


class FakeGridFS:
    """The subset of gridfs.GridFS the blob store uses."""

    def __init__(self):
        self.files = {}

    def put(self, data, **kwargs):
        file_id = ObjectId()
        self.files[file_id] = bytes(data)
        return file_id

    def get(self, file_id):
        if file_id not in self.files:
            raise NoFile(f"no file {file_id}")
        return SimpleNamespace(read=lambda: self.files[file_id])

    def delete(self, file_id):
        self.files.pop(file_id, None)


class StubCompletions:
    """Replays queued replies; an Exception in the queue is raised instead."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class StubOpenAI:
    def __init__(self):
        self.completions = StubCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient().job_tracker_test


@pytest.fixture
def gridfs_fake():
    return FakeGridFS()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def resume_store(mongo_db, gridfs_fake, upload_dir):
    return ResumeStore(
        collection=mongo_db.resumes,
        backends={
            StorageKind.filesystem: FilesystemBlobStore(str(upload_dir)),
            StorageKind.gridfs: GridFSBlobStore(gridfs_fake),
        },
        default_kind=StorageKind.filesystem,
    )


@pytest.fixture
def job_service(mongo_db):
    return JobApplicationService(collection=mongo_db.jobs)


@pytest.fixture
def upstream():
    return StubOpenAI()


@pytest.fixture
def analysis_client(upstream):
    return AnalysisClient(
        client=upstream,
        policy=[ModelAttempt(PRIMARY_MODEL, 1), ModelAttempt(FALLBACK_MODEL, 1)],
    )


@pytest.fixture
def api(resume_store, job_service, analysis_client):
    app.dependency_overrides[get_resume_store] = lambda: resume_store
    app.dependency_overrides[get_job_service] = lambda: job_service
    app.dependency_overrides[get_resume_analyzer] = lambda: ResumeAnalyzer(
        store=resume_store, client=analysis_client
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id: str = "user-1") -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def headers():
    return auth_headers("user-1")


@pytest.fixture
def other_headers():
    return auth_headers("user-2")


@pytest.fixture
def pdf_factory():
    return make_pdf

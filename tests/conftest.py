"""Shared fakes for the downloader / transcoder / storage collaborators."""

import threading
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from clipworker.app import create_app
from clipworker.core.config import Settings
from clipworker.core.errors import FetchError, TranscodeError, UploadError
from clipworker.services.pipeline import MediaPipeline

PUBLIC_BASE = "https://storage.example.test/public"


class FakeDownloader:
    def __init__(self, payload: bytes = b"\x00" * 4096, fail: bool = False):
        self.payload = payload
        self.fail = fail
        self.calls = []

    def fetch(self, url, dest: Path) -> int:
        self.calls.append((url, dest))
        if self.fail:
            raise FetchError("Failed to fetch video: HTTP 404")
        dest.write_bytes(self.payload)
        return len(self.payload)


class FakeTranscoder:
    """Writes ``output`` bytes to the last argument (ffmpeg's output path)."""

    def __init__(self, output: bytes = b"\x01" * 2048, fail: bool = False):
        self.ffmpeg_bin = "ffmpeg"
        self.output = output
        self.fail = fail
        self.calls = []
        self.lock = threading.Lock()

    def check_available(self) -> bool:
        return True

    def run(self, args, description=""):
        with self.lock:
            self.calls.append(list(args))
        if self.fail:
            raise TranscodeError(
                "Command failed with exit code 1", stderr="Invalid data found"
            )
        Path(args[-1]).write_bytes(self.output)


class FakeStorage:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads = []
        self.objects = {}
        self.lock = threading.Lock()

    def upload(self, bucket, key, local_path, content_type, overwrite=True):
        if self.fail:
            raise UploadError("Upload failed: bucket not found")
        data = Path(local_path).read_bytes()
        with self.lock:
            self.uploads.append((bucket, key, content_type, overwrite))
            self.objects[(bucket, key)] = data

    def get_public_url(self, bucket, key):
        return f"{PUBLIC_BASE}/{bucket}/{key}"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SUPABASE_URL="https://project.supabase.test",
        SUPABASE_SERVICE_ROLE_KEY="service-role-key",
        SCRATCH_DIR=str(tmp_path / "scratch"),
    )


@pytest.fixture
def downloader():
    return FakeDownloader()


@pytest.fixture
def transcoder():
    return FakeTranscoder()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def pipeline(settings, downloader, transcoder, storage):
    return MediaPipeline(
        downloader=downloader,
        transcoder=transcoder,
        storage=storage,
        scratch_dir=settings.SCRATCH_DIR,
        bucket=settings.STORAGE_BUCKET,
    )


@pytest.fixture
def client(settings, pipeline):
    app = create_app(settings=settings, pipeline=pipeline)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def scratch_dir(settings):
    return Path(settings.SCRATCH_DIR)

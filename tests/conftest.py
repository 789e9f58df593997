import os
import tempfile

# Keep test runs from writing logs into the working tree
os.environ.setdefault("FILE_STORE_LOG_DIR", tempfile.mkdtemp(prefix="file_store_logs_"))

import pytest

from app.services.storage_manager import StorageManager
from main import app


@pytest.fixture
def storage_dir(tmp_path):
    return tmp_path / "store"


@pytest.fixture(autouse=True)
def storage_manager(storage_dir):
    """Point the app at a fresh storage root for every test."""
    manager = StorageManager(storage_dir)
    manager.initialize()
    app.state.storage_manager = manager
    yield manager

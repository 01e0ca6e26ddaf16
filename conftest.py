from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path before tests import modules
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from batchembed.settings import AppSettings  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        API_KEYS="test-api-key,second-key",
        EMBEDDING_PROVIDER="mock",
        EMBEDDING_DIMENSION=32,
        STORAGE_PATH=str(tmp_path / "storage"),
        WORKER_COUNT=2,
        JOB_QUEUE_CAPACITY=10,
        RATE_LIMIT_PER_SECOND=1000,
        RATE_LIMIT_BURST=1000,
    )

from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SRC = BASE_DIR / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lms_console.config import ClientConfig  # noqa: E402
from lms_console.http_client import HttpClient  # noqa: E402
from lms_console.session import AuthContext  # noqa: E402

API = "https://api.example.com/api"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    return ClientConfig(
        env_name="test",
        api_base_url=API,
        retries=0,
        retry_backoff_seconds=0,
        page_size=20,
        export_dir=str(tmp_path / "exports"),
    )


@pytest.fixture
def http(config: ClientConfig) -> HttpClient:
    return HttpClient(config=config)


@pytest.fixture
def admin_auth() -> AuthContext:
    return AuthContext(token="admin-token", role="admin", user_id="u-admin")


@pytest.fixture
def instructor_auth() -> AuthContext:
    return AuthContext(token="instructor-token", role="instructor", user_id="u-inst")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

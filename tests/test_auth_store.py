from __future__ import annotations

import pytest

from lms_console.auth_store import AuthStore
from lms_console.exceptions import AuthError
from lms_console.models import SessionData
from lms_console.session import AuthContext, persist_auth_context, restore_auth_context


def test_auth_store_round_trip(tmp_path) -> None:
    store = AuthStore(base_dir=str(tmp_path))
    store.save(SessionData(access_token="tok", role="admin", user_id="u1", env_name="dev"))
    loaded = store.load()
    assert loaded is not None
    assert loaded.access_token == "tok"
    store.clear()
    assert store.load() is None


def test_auth_store_discards_corrupt_file(tmp_path) -> None:
    store = AuthStore(base_dir=str(tmp_path))
    (tmp_path / "session.json").write_text("{not json")
    assert store.load() is None
    assert not (tmp_path / "session.json").exists()


def test_auth_store_discards_incomplete_session(tmp_path) -> None:
    store = AuthStore(base_dir=str(tmp_path))
    (tmp_path / "session.json").write_text('{"role": "admin"}')
    assert store.load() is None


def test_restore_and_persist_context(tmp_path) -> None:
    store = AuthStore(base_dir=str(tmp_path))
    assert restore_auth_context(store).is_authenticated is False

    persist_auth_context(AuthContext(token="tok", role="instructor", user_id="u2"), store, env_name="dev")
    context = restore_auth_context(store)
    assert context == AuthContext(token="tok", role="instructor", user_id="u2")
    assert context.headers() == {"Authorization": "Bearer tok"}


def test_persist_requires_token(tmp_path) -> None:
    with pytest.raises(AuthError):
        persist_auth_context(AuthContext(role="admin"), AuthStore(base_dir=str(tmp_path)))


def test_require_checks_token_then_role() -> None:
    with pytest.raises(AuthError) as missing:
        AuthContext().require(("admin",))
    assert missing.value.code == "TOKEN_MISSING"

    with pytest.raises(AuthError) as forbidden:
        AuthContext(token="t", role="student").require(("admin", "instructor"))
    assert forbidden.value.status_code == 403

    AuthContext(token="t", role="Admin").require(("admin",))

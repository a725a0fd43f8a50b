"""Unit tests for SessionManager."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from codeforge.compiler.pipeline import AssemblyPipeline
from codeforge.compiler.scaffold import ScaffoldOptions
from codeforge.service.project_store import ProjectStore
from codeforge.service.session_manager import (
    DEFAULT_SESSION_ID,
    SessionManager,
    SessionNotFoundError,
)
from tests.conftest import CPP_OUTPUT, REACT_OUTPUT


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mgr(clock: FakeClock) -> SessionManager:
    return SessionManager(ttl_seconds=60, cleanup_interval=9999, clock=clock)


class TestSessions:
    def test_create(self, session_manager: SessionManager) -> None:
        info = session_manager.create_session(metadata={"user": "alice"})
        assert len(info.session_id) == 32
        assert info.project_count == 0
        assert info.preview_count == 0
        assert info.metadata == {"user": "alice"}

    def test_metadata_is_copied(self, session_manager: SessionManager) -> None:
        metadata = {"env": "test"}
        info = session_manager.create_session(metadata=metadata)
        metadata["env"] = "changed"
        assert session_manager.get_session(info.session_id).metadata == {"env": "test"}

    def test_project_count(self, session_manager: SessionManager) -> None:
        sid = session_manager.create_session().session_id
        session_manager.get_store(sid).load_text(REACT_OUTPUT)
        assert session_manager.get_session(sid).project_count == 1

    def test_unknown_session(self, session_manager: SessionManager) -> None:
        with pytest.raises(SessionNotFoundError, match="not found"):
            session_manager.get_store("nonexist123")
        with pytest.raises(SessionNotFoundError, match="not found"):
            session_manager.close_session("nonexist123")

    def test_close(self, session_manager: SessionManager) -> None:
        sid = session_manager.create_session().session_id
        session_manager.close_session(sid)
        with pytest.raises(SessionNotFoundError):
            session_manager.get_session(sid)

    def test_stores_are_independent(self, session_manager: SessionManager) -> None:
        a = session_manager.get_store(session_manager.create_session().session_id)
        b = session_manager.get_store(session_manager.create_session().session_id)
        a.load_text(REACT_OUTPUT)
        assert len(a.list_projects()) == 1
        assert b.list_projects() == []

    def test_store_factory(self) -> None:
        pipeline = AssemblyPipeline(ScaffoldOptions(source_tag="HOST_LOG"))
        mgr = SessionManager(store_factory=lambda: ProjectStore(pipeline))
        sid = mgr.create_session().session_id
        pid = mgr.get_store(sid).load_text(REACT_OUTPUT).project_id
        assert "HOST_LOG" in mgr.preview(pid, sid).document


class TestDefaultSession:
    def test_created_once(self, session_manager: SessionManager) -> None:
        assert session_manager.default_store() is session_manager.default_store()

    def test_not_listed(self, session_manager: SessionManager) -> None:
        session_manager.default_store()
        assert session_manager.list_sessions() == []
        assert len(session_manager) == 1

    def test_never_expires(self, mgr: SessionManager, clock: FakeClock) -> None:
        store = mgr.default_store()
        clock.advance(10_000)
        assert mgr.purge_expired() == 0
        assert mgr.default_store() is store


class TestExpiry:
    def test_expires_after_ttl(self, mgr: SessionManager, clock: FakeClock) -> None:
        sid = mgr.create_session().session_id
        clock.advance(60)
        with pytest.raises(SessionNotFoundError, match="expired"):
            mgr.get_store(sid)
        with pytest.raises(SessionNotFoundError, match="not found"):
            mgr.get_store(sid)

    def test_use_extends_deadline(self, mgr: SessionManager, clock: FakeClock) -> None:
        sid = mgr.create_session().session_id
        clock.advance(45)
        mgr.get_session(sid)
        clock.advance(45)
        assert mgr.get_session(sid).session_id == sid

    def test_list_skips_expired(self, mgr: SessionManager, clock: FakeClock) -> None:
        mgr.create_session()
        clock.advance(30)
        live = mgr.create_session().session_id
        clock.advance(30)
        assert [s.session_id for s in mgr.list_sessions()] == [live]
        assert len(mgr) == 1

    def test_purge_expired(self, mgr: SessionManager, clock: FakeClock) -> None:
        mgr.create_session()
        mgr.create_session()
        clock.advance(61)
        mgr.create_session()
        assert mgr.purge_expired() == 2
        assert len(mgr) == 1
        assert mgr.purge_expired() == 0

    def test_cleanup_thread(self, clock: FakeClock) -> None:
        mgr = SessionManager(ttl_seconds=60, cleanup_interval=0.01, clock=clock)
        mgr.create_session()
        clock.advance(61)
        mgr.start()
        try:
            deadline = time.monotonic() + 2
            while mgr._sessions:
                assert time.monotonic() < deadline, "cleanup thread never purged"
                time.sleep(0.01)
        finally:
            mgr.stop()


class TestPreview:
    def test_assembles_once(self, session_manager: SessionManager) -> None:
        sid = session_manager.create_session().session_id
        pid = session_manager.get_store(sid).load_text(CPP_OUTPUT).project_id
        first = session_manager.preview(pid, sid)
        assert "PREVIEW_CONSOLE" in first.document
        assert session_manager.preview(pid, sid) is first
        assert session_manager.get_session(sid).preview_count == 1

    def test_explanation_attached(self, session_manager: SessionManager) -> None:
        pid = session_manager.default_store().load_text(REACT_OUTPUT).project_id
        assert session_manager.preview(pid).explanation.startswith("Here is a small counter app.")

    def test_default_session(self, session_manager: SessionManager) -> None:
        pid = session_manager.default_store().load_text(REACT_OUTPUT).project_id
        assert session_manager.preview(pid) is session_manager.preview(pid, DEFAULT_SESSION_ID)

    def test_removed_project_dropped(self, session_manager: SessionManager) -> None:
        sid = session_manager.create_session().session_id
        store = session_manager.get_store(sid)
        pid = store.load_text(REACT_OUTPUT).project_id
        session_manager.preview(pid, sid)
        store.remove_project(pid)
        assert session_manager.get_session(sid).preview_count == 0
        with pytest.raises(KeyError, match="No project loaded"):
            session_manager.preview(pid, sid)

    def test_scoped_to_session(self, session_manager: SessionManager) -> None:
        a = session_manager.create_session().session_id
        b = session_manager.create_session().session_id
        pid = session_manager.get_store(a).load_text(REACT_OUTPUT).project_id
        session_manager.preview(pid, a)
        with pytest.raises(KeyError, match="No project loaded"):
            session_manager.preview(pid, b)

    def test_unknown_session(self, session_manager: SessionManager) -> None:
        with pytest.raises(SessionNotFoundError):
            session_manager.preview("missing", "nonexist123")

    def test_closed_session_drops_previews(self, session_manager: SessionManager) -> None:
        sid = session_manager.create_session().session_id
        pid = session_manager.get_store(sid).load_text(REACT_OUTPUT).project_id
        session_manager.preview(pid, sid)
        session_manager.close_session(sid)
        with pytest.raises(SessionNotFoundError):
            session_manager.preview(pid, sid)

    def test_concurrent_requests_share_one_document(
        self, session_manager: SessionManager
    ) -> None:
        sid = session_manager.create_session().session_id
        pid = session_manager.get_store(sid).load_text(REACT_OUTPUT).project_id
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: session_manager.preview(pid, sid), range(32)))
        assert all(r is results[0] for r in results)


class TestThreadSafety:
    def test_concurrent_creates(self, session_manager: SessionManager) -> None:
        with ThreadPoolExecutor(max_workers=10) as pool:
            ids = list(pool.map(lambda _: session_manager.create_session().session_id, range(50)))
        assert len(set(ids)) == 50
        assert len(session_manager) == 50

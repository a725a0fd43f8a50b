"""Unit tests for ProjectStore."""

from __future__ import annotations

import pytest

from codeforge.compiler.pipeline import AssemblyPipeline
from codeforge.compiler.scaffold import ScaffoldOptions
from codeforge.models.artifact import Artifact, ProjectKind
from codeforge.service.project_store import ProjectStore
from tests.conftest import CPP_OUTPUT, REACT_OUTPUT

LOG = {"source": "PREVIEW_CONSOLE", "type": "log", "message": "clicked"}


class TestLoad:
    def test_load_text(self, store: ProjectStore) -> None:
        result = store.load_text(REACT_OUTPUT)
        assert len(result.project_id) == 8
        assert result.kind == ProjectKind.FRAMEWORK
        assert result.files == [
            "index.html",
            "src/index.jsx",
            "src/App.jsx",
            "src/components/Button.jsx",
            "src/styles.css",
        ]
        assert result.explanation.endswith("Run it and click the button.")

    def test_load_artifacts(self, store: ProjectStore) -> None:
        artifact = Artifact(name="main.py", language="py", content="print('x')")
        result = store.load_artifacts([artifact], explanation="Prints x.")
        assert result.kind == ProjectKind.NATIVE
        assert store.get_artifacts(result.project_id) == [artifact]
        assert store.get_explanation(result.project_id) == "Prints x."

    def test_reload_creates_new_project(self, store: ProjectStore) -> None:
        first = store.load_text(CPP_OUTPUT)
        second = store.load_text(CPP_OUTPUT)
        assert first.project_id != second.project_id
        assert len(store.list_projects()) == 2

    def test_load_without_files(self, store: ProjectStore) -> None:
        result = store.load_text("No code here.")
        assert result.files == []
        assert result.kind == ProjectKind.PLAIN


class TestQueries:
    def test_classify(self, store: ProjectStore) -> None:
        pid = store.load_text(CPP_OUTPUT).project_id
        assert store.classify(pid) == ProjectKind.NATIVE

    def test_assemble(self, store: ProjectStore) -> None:
        pid = store.load_text(REACT_OUTPUT).project_id
        result = store.assemble(pid)
        assert result.kind == ProjectKind.FRAMEWORK
        assert result.explanation.startswith("Here is a small counter app.")
        assert "text/babel" in result.document

    def test_get_artifacts_returns_copy(self, store: ProjectStore) -> None:
        pid = store.load_text(REACT_OUTPUT).project_id
        store.get_artifacts(pid).clear()
        assert len(store.get_artifacts(pid)) == 5

    def test_list_projects(self, store: ProjectStore) -> None:
        pid = store.load_text(CPP_OUTPUT).project_id
        store.record_log(pid, LOG)
        [summary] = store.list_projects()
        assert summary.project_id == pid
        assert summary.kind == ProjectKind.NATIVE
        assert summary.files == 1
        assert summary.logs == 1

    def test_remove_project(self, store: ProjectStore) -> None:
        pid = store.load_text(CPP_OUTPUT).project_id
        store.remove_project(pid)
        assert store.list_projects() == []

    def test_contains(self, store: ProjectStore) -> None:
        pid = store.load_text(CPP_OUTPUT).project_id
        assert pid in store
        assert "missing" not in store
        store.remove_project(pid)
        assert pid not in store

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.get_artifacts("missing"),
            lambda s: s.get_explanation("missing"),
            lambda s: s.classify("missing"),
            lambda s: s.assemble("missing"),
            lambda s: s.remove_project("missing"),
            lambda s: s.get_logs("missing"),
            lambda s: s.clear_logs("missing"),
        ],
    )
    def test_unknown_project_raises(self, store: ProjectStore, call) -> None:
        with pytest.raises(KeyError, match="No project loaded with id 'missing'"):
            call(store)


class TestLogs:
    def test_record_and_get(self, store: ProjectStore) -> None:
        pid = store.load_text(REACT_OUTPUT).project_id
        event = store.record_log(pid, LOG)
        assert event.message == "clicked"
        assert store.get_logs(pid) == [event]

    def test_logs_are_per_project(self, store: ProjectStore) -> None:
        a = store.load_text(REACT_OUTPUT).project_id
        b = store.load_text(REACT_OUTPUT).project_id
        store.record_log(a, LOG)
        assert store.get_logs(b) == []

    def test_assemble_keeps_logs(self, store: ProjectStore) -> None:
        pid = store.load_text(REACT_OUTPUT).project_id
        store.record_log(pid, LOG)
        store.assemble(pid)
        assert len(store.get_logs(pid)) == 1

    def test_clear(self, store: ProjectStore) -> None:
        pid = store.load_text(REACT_OUTPUT).project_id
        store.record_log(pid, LOG)
        assert store.clear_logs(pid) == 1
        assert store.get_logs(pid) == []

    def test_malformed_message(self, store: ProjectStore) -> None:
        pid = store.load_text(REACT_OUTPUT).project_id
        with pytest.raises(ValueError):
            store.record_log(pid, {"source": "PREVIEW_CONSOLE", "type": "trace", "message": "x"})

    def test_source_tag_follows_pipeline(self) -> None:
        store = ProjectStore(AssemblyPipeline(ScaffoldOptions(source_tag="HOST_LOG")))
        pid = store.load_text(REACT_OUTPUT).project_id
        with pytest.raises(ValueError, match="Unexpected message source"):
            store.record_log(pid, LOG)
        store.record_log(pid, {**LOG, "source": "HOST_LOG"})
        assert len(store.get_logs(pid)) == 1
        assert "HOST_LOG" in store.assemble(pid).document

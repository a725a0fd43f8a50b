"""Tests for the artifact and console models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from codeforge.models import Artifact, ConsoleMessage, LogType, ProjectKind


class TestArtifact:
    def test_extension(self) -> None:
        assert Artifact(name="src/App.JSX", language="jsx").extension == "jsx"

    def test_extension_uses_basename(self) -> None:
        assert Artifact(name="v1.2/Makefile", language="makefile").extension == ""

    def test_basename(self) -> None:
        assert Artifact(name="src/components/Button.jsx", language="jsx").basename == "Button.jsx"

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Artifact(name="", language="text")

    def test_frozen(self) -> None:
        artifact = Artifact(name="a.js", language="js", content="x")
        with pytest.raises(ValidationError):
            artifact.content = "y"

    def test_content_defaults_empty(self) -> None:
        assert Artifact(name="a.js", language="js").content == ""


class TestEnums:
    def test_project_kind_values(self) -> None:
        assert [str(k) for k in ProjectKind] == ["native", "templating", "framework", "plain"]

    def test_log_types(self) -> None:
        assert {t.value for t in LogType} == {"log", "error", "warn", "info"}

    def test_console_message_parses_type(self) -> None:
        message = ConsoleMessage.model_validate(
            {"source": "PREVIEW_CONSOLE", "type": "warn", "message": "careful"}
        )
        assert message.type is LogType.WARN

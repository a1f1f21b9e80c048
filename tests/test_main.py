"""Tests for the report command."""

import json
from pathlib import Path

import pytest

from conftest import make_record
from survey_pulse import main as main_module


@pytest.fixture
def local_env(monkeypatch: pytest.MonkeyPatch, data_dir: Path) -> Path:
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("STORAGE_DATA_PATH", str(data_dir))
    monkeypatch.setattr(main_module, "setup_logging", lambda *args: None)
    monkeypatch.setattr(main_module, "load_dotenv", lambda: None)
    data_dir.mkdir(parents=True)
    records = [
        make_record("Team A", (1, 5), (2, "More focus time")),
        make_record("Team B", (1, 1), (2, "  ")),
    ]
    (data_dir / "survey_submissions.json").write_text(
        json.dumps([r.to_payload() for r in records]), encoding="utf-8"
    )
    return data_dir


class TestReportMain:
    def test_text_report(self, local_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main_module.report_main([]) == 0
        out = capsys.readouterr().out
        assert "Total submissions: 2" in out
        assert "Very satisfied: 1 (50.0%)" in out
        assert "  - More focus time" in out

    def test_json_report_for_group(self, local_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main_module.report_main(["--group", "Team B", "--json"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["total"] == 1
        assert report["groupIds"] == ["Team A", "Team B"]
        very_dissatisfied = report["results"][0]["options"][0]
        assert very_dissatisfied == {
            "value": 1, "label": "Very dissatisfied", "count": 1, "percentage": 100.0,
        }

    def test_store_error_returns_failure(self, local_env: Path) -> None:
        (local_env / "survey_submissions.json").write_text("{broken", encoding="utf-8")
        assert main_module.report_main([]) == 1


@pytest.fixture
def catalog_env(monkeypatch: pytest.MonkeyPatch, data_dir: Path) -> Path:
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("STORAGE_DATA_PATH", str(data_dir))
    monkeypatch.setattr(main_module, "setup_logging", lambda *args: None)
    monkeypatch.setattr(main_module, "load_dotenv", lambda: None)
    return data_dir


def stored_questions(data_dir: Path) -> list[dict]:
    return json.loads((data_dir / "survey_questions.json").read_text(encoding="utf-8"))


class TestQuestionsMain:
    def test_list_empty_catalog(self, catalog_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main_module.questions_main(["list"]) == 0
        assert "default catalog" in capsys.readouterr().out

    def test_add_assigns_next_id(self, catalog_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        scale = {"id": 99, "type": "emoji_scale", "text": "Mood?", "options": [{"value": 1, "text": "Low"}]}
        assert main_module.questions_main(["add", json.dumps(scale)]) == 0
        assert main_module.questions_main(["add", '{"type": "text_input", "text": "Why?"}']) == 0

        assert [q["id"] for q in stored_questions(catalog_env)] == [1, 2]
        assert stored_questions(catalog_env)[0]["options"] == [{"value": 1, "text": "Low"}]
        assert "Added 2: [text_input] Why?" in capsys.readouterr().out

    def test_add_rejects_invalid_definition(
        self, catalog_env: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        assert main_module.questions_main(["add", '{"type": "emoji_scale", "text": "Mood?"}']) == 1
        assert "Emoji scale questions must have options" in caplog.text
        assert not (catalog_env / "survey_questions.json").exists()

    def test_add_rejects_malformed_json(self, catalog_env: Path, caplog: pytest.LogCaptureFixture) -> None:
        assert main_module.questions_main(["add", "{type"]) == 1
        assert "must be valid JSON" in caplog.text

    def test_update_and_list(self, catalog_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main_module.questions_main(["add", '{"type": "text_input", "text": "Why?"}'])
        update = '{"id": 1, "type": "text_input", "text": "Why not?", "placeholder": "..."}'
        assert main_module.questions_main(["update", update]) == 0
        capsys.readouterr()

        assert main_module.questions_main(["list", "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == [
            {"id": 1, "type": "text_input", "text": "Why not?", "placeholder": "..."}
        ]

    def test_update_requires_id(self, catalog_env: Path, caplog: pytest.LogCaptureFixture) -> None:
        assert main_module.questions_main(["update", '{"type": "text_input", "text": "Why?"}']) == 1
        assert "Missing required fields: id, text, and type" in caplog.text

    def test_unknown_id_is_reported(self, catalog_env: Path, caplog: pytest.LogCaptureFixture) -> None:
        assert main_module.questions_main(["delete", "7"]) == 1
        assert "Question not found: 7" in caplog.text
        update = '{"id": 7, "type": "text_input", "text": "Why?"}'
        assert main_module.questions_main(["update", update]) == 1

    def test_delete(self, catalog_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main_module.questions_main(["add", '{"type": "text_input", "text": "Why?"}'])
        assert main_module.questions_main(["delete", "1"]) == 0
        assert "Deleted 1: [text_input] Why?" in capsys.readouterr().out
        assert stored_questions(catalog_env) == []
